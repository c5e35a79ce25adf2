"""Traversal helpers over a flat session list."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol


class SessionLike(Protocol):
    """ツリー走査に必要なセッションの属性."""

    @property
    def id(self) -> str: ...

    @property
    def parent_id(self) -> str | None: ...


def downward(sessions: Iterable[SessionLike], root_id: str) -> list[str]:
    """
    root_id とその全子孫のIDを幅優先の発見順で返す.

    Args:
        sessions: セッション一覧
        root_id: 起点となるセッションID

    Returns:
        root_id を先頭とするセッションIDのリスト
    """
    children: dict[str, list[str]] = {}
    for session in sessions:
        if not session.parent_id:
            continue
        children.setdefault(session.parent_id, []).append(session.id)

    seen = {root_id}
    ids = [root_id]
    # ids はループ中に伸びる
    for session_id in ids:
        for child in children.get(session_id, ()):
            if child in seen:
                continue
            seen.add(child)
            ids.append(child)
    return ids


def upward(sessions: Iterable[SessionLike], root_id: str) -> list[str]:
    """
    root_id から親方向へ辿った祖先チェーンを返す.

    循環参照がある場合は既出のIDに到達した時点で打ち切る.

    Args:
        sessions: セッション一覧
        root_id: 起点となるセッションID

    Returns:
        root_id を先頭に、親、祖父母…と続くセッションIDのリスト
    """
    parents = {s.id: s.parent_id for s in sessions if s.parent_id}

    seen = {root_id}
    ids = [root_id]
    current = root_id
    while True:
        parent_id = parents.get(current)
        if not parent_id or parent_id in seen:
            return ids
        seen.add(parent_id)
        ids.append(parent_id)
        current = parent_id
