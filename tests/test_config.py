import pytest
from pydantic import ValidationError

from typedrest.config import DEFAULT_HOST, ClientSettings


def test_defaults_target_public_api():
    s = ClientSettings.from_env({})
    assert s.host == DEFAULT_HOST
    assert s.scheme == "https"
    assert s.timeout > 0


def test_env_overrides():
    s = ClientSettings.from_env(
        {"TYPEDREST_HOST": "localhost:8000", "TYPEDREST_SCHEME": "http", "TYPEDREST_TIMEOUT": "2.5"}
    )
    assert (s.scheme, s.host, s.timeout) == ("http", "localhost:8000", 2.5)


def test_timeout_must_be_finite_positive():
    with pytest.raises(ValidationError):
        ClientSettings.from_env({"TYPEDREST_TIMEOUT": "0"})


def test_timeout_rejects_infinity():
    with pytest.raises(ValidationError):
        ClientSettings.from_env({"TYPEDREST_TIMEOUT": "inf"})
