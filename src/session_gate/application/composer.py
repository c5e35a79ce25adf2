"""Composer blocked-state computation."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from session_gate.application.auto_accept import resolve_auto_accept
from session_gate.application.models import (
    BlockedState,
    PermissionRequest,
    QuestionRequest,
    Session,
)
from session_gate.application.request_tree import (
    session_permission_request,
    session_question_request,
)


def compute_blocked_state(
    sessions: Sequence[Session],
    permissions: Mapping[str, Sequence[PermissionRequest] | None],
    questions: Mapping[str, Sequence[QuestionRequest] | None],
    auto_accept: Mapping[str, bool],
    session_id: str | None,
    directory: str | None = None,
) -> BlockedState:
    """
    セッションのコンポーザーがブロックされているかを計算する.

    質問は常にブロック対象。パーミッションは Auto Accept で
    自動応答されないものだけをブロック対象とする.

    Args:
        sessions: セッション一覧
        permissions: セッションID → 保留中パーミッション
        questions: セッションID → 保留中質問
        auto_accept: Auto Accept 設定のスナップショット
        session_id: 表示中のセッションID
        directory: プロジェクトディレクトリ

    Returns:
        パーミッションと質問をそれぞれ保持するブロック状態
    """
    if not session_id:
        return BlockedState()

    permission = session_permission_request(
        sessions,
        permissions,
        session_id,
        lambda item: not resolve_auto_accept(auto_accept, sessions, item, directory),
    )
    question = session_question_request(sessions, questions, session_id)
    return BlockedState(permission=permission, question=question)
