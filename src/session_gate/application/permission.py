"""Permission auto-accept service."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from session_gate.application.auto_accept import accept_key, resolve_auto_accept
from session_gate.application.models import (
    PermissionReply,
    PermissionRequest,
    PermissionResponseKind,
    Session,
)
from session_gate.application.responded import RespondedCache
from session_gate.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from session_gate.infrastructure.config import Config
    from session_gate.infrastructure.preferences import PreferenceStore

# コールバック型定義
RespondCallback = Callable[[PermissionReply], Awaitable[None]]
ListPermissionsCallback = Callable[[str], Awaitable[Sequence[PermissionRequest]]]
SessionSource = Callable[[str], Sequence[Session]]  # (directory) -> sessions

PERMISSION_ASKED = "permission.asked"

logger = get_logger(__name__)


class PermissionRespondError(Exception):
    """パーミッション応答の送信に失敗した場合の例外."""

    def __init__(self, permission_id: str, message: str) -> None:
        """
        Initialize PermissionRespondError.

        Args:
            permission_id: 応答に失敗したパーミッションID
            message: エラーメッセージ
        """
        super().__init__(f"Failed to respond to permission {permission_id}: {message}")
        self.permission_id = permission_id


class PermissionService:
    """Auto Accept 設定の管理とパーミッションへの自動応答を行うサービス."""

    def __init__(
        self,
        config: Config,
        preferences: PreferenceStore,
        *,
        respond: RespondCallback,
        list_permissions: ListPermissionsCallback | None = None,
        sessions_for: SessionSource | None = None,
    ) -> None:
        """
        Initialize PermissionService.

        Args:
            config: アプリケーション設定
            preferences: Auto Accept 設定の保存先
            respond: パーミッション応答を送信するコールバック
            list_permissions: ディレクトリの保留中パーミッションを取得するコールバック
            sessions_for: ディレクトリのセッション一覧を返すコールバック
        """
        self._preferences = preferences
        self._respond = respond
        self._list_permissions = list_permissions
        self._sessions_for = sessions_for
        self._auto_accept: dict[str, bool] = preferences.load()
        self._responded = RespondedCache(
            ttl_seconds=config.responded_ttl_seconds,
            max_size=config.max_responded,
        )
        self._enable_versions: dict[str, int] = {}
        self._responding: set[str] = set()

    @property
    def auto_accept(self) -> dict[str, bool]:
        """Auto Accept 設定のコピー."""
        return dict(self._auto_accept)

    def _sessions(self, directory: str | None) -> Sequence[Session]:
        if not directory or self._sessions_for is None:
            return []
        return self._sessions_for(directory)

    def is_auto_accepting(self, session_id: str, directory: str | None = None) -> bool:
        """
        セッションが Auto Accept 状態かどうかを判定する.

        Args:
            session_id: セッションID
            directory: プロジェクトディレクトリ

        Returns:
            Auto Accept 状態の場合True
        """
        return self.auto_responds(
            PermissionRequest(id="", session_id=session_id), directory
        )

    def auto_responds(
        self, permission: PermissionRequest, directory: str | None = None
    ) -> bool:
        """パーミッション要求に自動応答するかどうかを判定する."""
        return resolve_auto_accept(
            self._auto_accept, self._sessions(directory), permission, directory
        )

    async def handle_event(self, event: Mapping[str, Any]) -> bool:
        """
        イベントを処理し、必要であればパーミッションに自動応答する.

        Args:
            event: ``type``、``properties``、``directory`` を持つイベント

        Returns:
            自動応答を送信した場合True
        """
        if event.get("type") != PERMISSION_ASKED:
            return False

        try:
            permission = PermissionRequest.model_validate(event.get("properties"))
        except ValidationError:
            logger.warning("Ignoring malformed permission event", exc_info=True)
            return False

        directory = event.get("directory")
        if not self.auto_responds(permission, directory):
            logger.debug(
                "Permission requires user decision",
                permission_id=permission.id,
                session_id=permission.session_id,
            )
            return False

        return await self.respond_once(permission, directory)

    async def respond_once(
        self, permission: PermissionRequest, directory: str | None = None
    ) -> bool:
        """
        パーミッションに一度だけ "once" で応答する.

        送信に失敗した場合は応答済みの記録を取り消し、再試行できるようにする.

        Args:
            permission: 応答するパーミッション
            directory: プロジェクトディレクトリ

        Returns:
            応答を送信した場合True
        """
        if self._responded.mark(permission.id):
            logger.debug("Permission already responded", permission_id=permission.id)
            return False

        reply = PermissionReply(
            session_id=permission.session_id,
            permission_id=permission.id,
            response="once",
            directory=directory,
        )
        try:
            await self._respond(reply)
        except Exception:
            self._responded.discard(permission.id)
            logger.exception(
                "Failed to auto-respond to permission",
                permission_id=permission.id,
                session_id=permission.session_id,
            )
            return False

        logger.info(
            "Auto-responded to permission",
            permission_id=permission.id,
            session_id=permission.session_id,
            directory=directory,
        )
        return True

    async def decide(
        self,
        permission: PermissionRequest,
        response: PermissionResponseKind,
        directory: str | None = None,
    ) -> bool:
        """
        ユーザーの判断でパーミッションに応答する.

        Args:
            permission: 応答するパーミッション
            response: 応答種別（once, always, reject）
            directory: プロジェクトディレクトリ

        Returns:
            応答を送信した場合True（同じパーミッションへの応答中はFalse）

        Raises:
            PermissionRespondError: 応答の送信に失敗した場合
        """
        if permission.id in self._responding:
            return False

        self._responding.add(permission.id)
        try:
            await self._respond(
                PermissionReply(
                    session_id=permission.session_id,
                    permission_id=permission.id,
                    response=response,
                    directory=directory,
                )
            )
        except Exception as e:
            logger.exception(
                "Failed to respond to permission",
                permission_id=permission.id,
                response=response,
            )
            raise PermissionRespondError(permission.id, str(e)) from e
        finally:
            self._responding.discard(permission.id)

        logger.info(
            "Responded to permission", permission_id=permission.id, response=response
        )
        return True

    def is_responding(self, permission_id: str) -> bool:
        """パーミッションへの応答を送信中かどうか."""
        return permission_id in self._responding

    def _bump_enable_version(self, session_id: str, directory: str | None) -> int:
        key = accept_key(session_id, directory)
        version = self._enable_versions.get(key, 0) + 1
        self._enable_versions[key] = version
        return version

    def _persist(self) -> None:
        self._preferences.save(dict(self._auto_accept))

    async def enable(self, session_id: str, directory: str) -> None:
        """
        セッションの Auto Accept を有効にする.

        有効化後、ディレクトリの保留中パーミッションのうち
        自動応答の対象となるものへ応答する.

        Args:
            session_id: セッションID
            directory: プロジェクトディレクトリ

        Raises:
            OSError: 設定の保存に失敗した場合
        """
        key = accept_key(session_id, directory)
        version = self._bump_enable_version(session_id, directory)
        self._auto_accept[key] = True
        if key != session_id:
            self._auto_accept.pop(session_id, None)
        self._persist()
        logger.info("Enabled auto-accept", session_id=session_id, directory=directory)

        if self._list_permissions is None:
            return

        try:
            pending = await self._list_permissions(directory)
        except Exception:
            logger.warning(
                "Failed to list pending permissions",
                directory=directory,
                exc_info=True,
            )
            return

        # 一覧取得中に設定が変わった場合は応答しない
        if self._enable_versions.get(key) != version:
            return
        if not self.is_auto_accepting(session_id, directory):
            return

        for permission in pending:
            if not permission.id:
                continue
            if not self.auto_responds(permission, directory):
                continue
            await self.respond_once(permission, directory)

    def disable(self, session_id: str, directory: str | None = None) -> None:
        """
        セッションの Auto Accept を無効にする.

        Args:
            session_id: セッションID
            directory: プロジェクトディレクトリ（省略時はレガシーキーに書き込む）

        Raises:
            OSError: 設定の保存に失敗した場合
        """
        self._bump_enable_version(session_id, directory)
        key = accept_key(session_id, directory)
        self._auto_accept[key] = False
        if key != session_id:
            self._auto_accept.pop(session_id, None)
        self._persist()
        logger.info("Disabled auto-accept", session_id=session_id, directory=directory)

    async def toggle_auto_accept(self, session_id: str, directory: str) -> None:
        """Auto Accept の有効/無効を切り替える."""
        if self.is_auto_accepting(session_id, directory):
            self.disable(session_id, directory)
            return
        await self.enable(session_id, directory)

    async def enable_auto_accept(self, session_id: str, directory: str) -> None:
        """Auto Accept が無効の場合のみ有効にする."""
        if self.is_auto_accepting(session_id, directory):
            return
        await self.enable(session_id, directory)

    def disable_auto_accept(self, session_id: str, directory: str | None = None) -> None:
        """Auto Accept を無効にする."""
        self.disable(session_id, directory)
