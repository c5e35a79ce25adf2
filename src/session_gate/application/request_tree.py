"""Resolve which pending request blocks a session tree."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, TypeVar

from session_gate.application.session_tree import SessionLike, downward

if TYPE_CHECKING:
    from session_gate.application.models import PermissionRequest, QuestionRequest

T = TypeVar("T")


def _include_all(_item: object) -> bool:
    return True


def resolve_blocking_request(
    sessions: Iterable[SessionLike],
    requests_by_owner: Mapping[str, Sequence[T] | None],
    root_session_id: str | None,
    include: Callable[[T], bool] | None = None,
) -> T | None:
    """
    セッションツリー内で最初にブロックしている要求を返す.

    root_session_id から幅優先で子孫を辿り、include を満たす要求を
    持つ最初のセッションについて、その先頭の該当要求を返す.
    起点セッション自身の要求は常に子孫より優先される.

    Args:
        sessions: セッション一覧
        requests_by_owner: セッションID → 保留中要求のリスト
        root_session_id: 起点となるセッションID（未指定なら None を返す）
        include: 対象とする要求の判定関数（省略時はすべて対象）

    Returns:
        該当する要求。見つからない場合は None
    """
    if not root_session_id:
        return None
    accept = include or _include_all

    for session_id in downward(sessions, root_session_id):
        for item in requests_by_owner.get(session_id) or ():
            if accept(item):
                return item
    return None


def session_permission_request(
    sessions: Iterable[SessionLike],
    requests_by_owner: Mapping[str, Sequence[PermissionRequest] | None],
    root_session_id: str | None,
    include: Callable[[PermissionRequest], bool] | None = None,
) -> PermissionRequest | None:
    """セッションツリー内でブロックしているパーミッション要求を返す."""
    return resolve_blocking_request(sessions, requests_by_owner, root_session_id, include)


def session_question_request(
    sessions: Iterable[SessionLike],
    requests_by_owner: Mapping[str, Sequence[QuestionRequest] | None],
    root_session_id: str | None,
    include: Callable[[QuestionRequest], bool] | None = None,
) -> QuestionRequest | None:
    """セッションツリー内でブロックしている質問要求を返す."""
    return resolve_blocking_request(sessions, requests_by_owner, root_session_id, include)
