from __future__ import annotations
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class ListKind(str, Enum):
    likes = "likes"
    dislikes = "dislikes"


class ProfileOut(BaseModel):
    user_id: int
    name: str
    email: str
    image: str
    likes: List[str] = []
    dislikes: List[str] = []


class ImageIn(BaseModel):
    reference: str | None = Field(..., examples=["https://cdn.example.com/u/1.png"])


class TextIn(BaseModel):
    text: str = ""


class DraftOut(BaseModel):
    session_id: str
    user_id: int
    name: str
    email: str
    image: str
    likes: List[str]
    dislikes: List[str]
    input_like: str
    input_dislike: str
    state: str          # seeded / editing / committed / abandoned
    dirty: bool
    notice: str | None = None
    committing: bool = False


class EditResult(BaseModel):
    accepted: bool
    draft: DraftOut
