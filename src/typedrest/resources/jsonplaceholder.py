"""Resources served by https://jsonplaceholder.typicode.com."""

from __future__ import annotations

from typing import ClassVar, Optional

from pydantic import Field

from typedrest.resources.model import Resource


class Post(Resource):
    collection: ClassVar[str] = "posts"

    id: Optional[int] = None  # assigned by the server on create
    title: str
    body: str
    user_id: int = Field(..., alias="userId")


class User(Resource):
    collection: ClassVar[str] = "users"

    id: int
    name: str
    email: str
    username: str = ""
    phone: str = ""
    website: str = ""


class Comment(Resource):
    collection: ClassVar[str] = "comments"

    id: Optional[int] = None
    post_id: int = Field(..., alias="postId")
    name: str = ""
    email: str = ""
    body: str = ""


class Album(Resource):
    collection: ClassVar[str] = "albums"

    id: Optional[int] = None
    user_id: int = Field(..., alias="userId")
    title: str = ""
