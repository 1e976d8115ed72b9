"""Domain models shared by the assembler, minifier and renderer."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CommentNode(BaseModel):
    # frozen; only the assembler appends to ``children``, before returning the tree
    model_config = ConfigDict(frozen=True)

    id: str
    parent_id: str | None = None  # only consulted while assembling
    author: str = ""
    content: str = ""
    created_at: datetime | None = None
    url: str | None = None
    score: int | None = None
    metadata: dict[str, Any] | None = None
    children: list[CommentNode] = Field(default_factory=list)


class Thread(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = ""
    title: str = ""
    description: str | None = None
    author: str = ""
    created_at: datetime | None = None
    source_type: str = ""  # e.g. "YouTube", "Reddit", "GitHub Issue"
    url: str | None = None
    metadata: dict[str, Any] | None = None
    comments: list[CommentNode] = Field(default_factory=list)


# ── Minified projection ────────────────────────────────────────────────────
# Short aliases keep the serialized payload small; dump with ``by_alias=True``.


class MinifiedComment(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    author: str = Field(default="", alias="a")
    content: str = Field(default="", alias="c")
    created_at: datetime | None = Field(default=None, alias="t")
    score: int | None = Field(default=None, alias="s")
    replies: list[MinifiedComment] = Field(default_factory=list, alias="r")


class MinifiedThread(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(default="", alias="t")
    description: str | None = Field(default=None, alias="d")
    author: str = Field(default="", alias="a")
    created_at: datetime | None = Field(default=None, alias="c")
    platform: str = Field(default="", alias="p")
    comments: list[MinifiedComment] = Field(default_factory=list, alias="co")
