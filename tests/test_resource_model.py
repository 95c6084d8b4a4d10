import pytest

from typedrest.codec.json_value import JsonArray, decode, from_python
from typedrest.errors import DecodeError
from typedrest.resources.jsonplaceholder import Album, Comment, Post, User
from typedrest.resources.model import decode_list


@pytest.mark.parametrize(
    "record",
    [
        Post(id=1, title="X", body="Y", user_id=1),
        Post(title="no id yet", body="", user_id=7),
        User(id=1, name="Leanne", email="l@example.org", phone="555"),
        Comment(id=3, post_id=1, name="c", email="e", body="b"),
        Album(id=2, user_id=1, title="t"),
    ],
)
def test_round_trip_law(record):
    assert type(record).from_json(record.to_json()) == record


def test_to_json_uses_wire_names():
    obj = Post(id=1, title="X", body="Y", user_id=1).to_json()
    assert set(obj.fields) == {"id", "title", "body", "userId"}


def test_optional_fields_default_when_missing():
    user = User.from_json(decode('{"id": 1, "name": "n", "email": "e"}'))
    assert user.phone == ""
    assert user.website == ""


def test_unknown_fields_are_ignored():
    user = User.from_json(decode('{"id": 1, "name": "n", "email": "e", "address": {"city": "x"}}'))
    assert user.name == "n"


def test_missing_required_field_names_the_key():
    with pytest.raises(DecodeError) as ei:
        Post.from_json(decode('{"id": 1, "body": "b", "userId": 1}'))
    assert ei.value.field == "title"
    assert "title" in str(ei.value)


def test_type_mismatch_names_field_and_expected_type():
    with pytest.raises(DecodeError) as ei:
        Post.from_json(decode('{"id": 1, "title": "t", "body": "b", "userId": "1"}'))
    assert ei.value.field == "userId"
    assert ei.value.expected == "integer"


def test_non_object_is_rejected():
    with pytest.raises(DecodeError):
        Post.from_json(decode("[1, 2]"))


def test_decode_list_preserves_order():
    rows = from_python([{"id": i, "title": str(i), "body": "", "userId": 1} for i in (3, 1, 2)])
    assert [p.id for p in decode_list(Post, rows)] == [3, 1, 2]


def test_decode_list_fails_on_bad_element_with_index():
    rows = from_python(
        [
            {"id": 1, "title": "a", "body": "", "userId": 1},
            {"id": 2, "title": "b", "body": "", "userId": 1},
            {"id": 3, "body": "", "userId": 1},
        ]
    )
    with pytest.raises(DecodeError) as ei:
        decode_list(Post, rows)
    assert ei.value.index == 2
    assert ei.value.field == "title"
    assert "element 2" in str(ei.value)


def test_decode_list_requires_array():
    with pytest.raises(DecodeError):
        decode_list(Post, decode('{"id": 1}'))
    assert decode_list(Post, JsonArray()) == []
