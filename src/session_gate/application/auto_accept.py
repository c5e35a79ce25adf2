"""Auto-accept policy resolution along a session lineage."""

from __future__ import annotations

import base64
from collections.abc import Iterable, Mapping
from typing import Protocol

from session_gate.application.session_tree import SessionLike, upward


class OwnedRequest(Protocol):
    """所有セッションIDを持つ要求."""

    @property
    def session_id(self) -> str: ...


def encode_directory(directory: str) -> str:
    """ディレクトリをURLセーフなbase64（パディングなし）に変換する."""
    encoded = base64.urlsafe_b64encode(directory.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def accept_key(session_id: str, directory: str | None = None) -> str:
    """
    Auto Accept 設定のキーを生成する.

    Args:
        session_id: セッションID
        directory: プロジェクトディレクトリ（省略時はレガシーキー）

    Returns:
        ``base64(directory)/session_id`` またはセッションIDそのもの
    """
    if not directory:
        return session_id
    return f"{encode_directory(directory)}/{session_id}"


def _accepted(
    auto_accept: Mapping[str, bool], session_id: str, directory: str | None
) -> bool | None:
    value = auto_accept.get(accept_key(session_id, directory))
    if value is None:
        value = auto_accept.get(session_id)
    return value


def resolve_auto_accept(
    auto_accept: Mapping[str, bool],
    sessions: Iterable[SessionLike],
    request: OwnedRequest,
    directory: str | None = None,
) -> bool:
    """
    要求を自動承認すべきかを判定する.

    要求元セッションから祖先方向へ辿り、最初に見つかった設定値を採用する.
    各セッションではディレクトリ単位のキーをレガシーキーより優先する.
    どこにも設定がなければ自動承認（True）とする.

    Args:
        auto_accept: Auto Accept 設定のスナップショット
        sessions: セッション一覧
        request: 判定対象の要求
        directory: プロジェクトディレクトリ

    Returns:
        自動承認する場合True
    """
    for session_id in upward(sessions, request.session_id):
        value = _accepted(auto_accept, session_id, directory)
        if value is not None:
            return value
    return True


def _is_non_allow_rule(rule: object) -> bool:
    if not rule:
        return False
    if isinstance(rule, str):
        return rule != "allow"
    if not isinstance(rule, dict):
        return False
    return any(action != "allow" for action in rule.values())


def has_permission_prompt_rules(permission: object) -> bool:
    """
    パーミッション設定がプロンプトを発生させうるかを判定する.

    Args:
        permission: プロジェクト設定の ``permission`` 値

    Returns:
        "allow" 以外のルールを含む場合True
    """
    if not permission:
        return False
    if isinstance(permission, str):
        return permission != "allow"
    if not isinstance(permission, dict):
        return False
    return any(_is_non_allow_rule(rule) for rule in permission.values())
