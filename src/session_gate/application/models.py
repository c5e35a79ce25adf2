"""Data models for sessions and pending requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

PermissionResponseKind = Literal["once", "always", "reject"]


class Session(BaseModel):
    """セッション情報（親セッション参照を持つ）."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    parent_id: str | None = Field(default=None, alias="parentID")


class PermissionRequest(BaseModel):
    """保留中のパーミッション要求."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    session_id: str = Field(alias="sessionID")
    permission: str = ""
    patterns: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class QuestionRequest(BaseModel):
    """保留中の質問要求."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    session_id: str = Field(alias="sessionID")
    questions: list[dict[str, Any]] = Field(default_factory=list)


@dataclass(frozen=True)
class PermissionReply:
    """パーミッション応答（PermissionService → 送信先）."""

    session_id: str
    permission_id: str
    response: PermissionResponseKind
    directory: str | None = None


@dataclass(frozen=True)
class BlockedState:
    """コンポーザーのブロック状態."""

    permission: PermissionRequest | None = None
    question: QuestionRequest | None = None

    @property
    def blocked(self) -> bool:
        """いずれかの要求がブロックしているか."""
        return self.permission is not None or self.question is not None
