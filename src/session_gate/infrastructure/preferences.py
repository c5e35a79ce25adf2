"""Persistence of auto-accept preferences."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from session_gate.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

_AUTO_ACCEPT_KEY = "autoAccept"
_LEGACY_AUTO_ACCEPT_KEY = "autoAcceptEdits"


def migrate(data: Any) -> Any:
    """
    旧形式の設定ドキュメントを現在の形式へ変換する.

    ``autoAccept`` がなく ``autoAcceptEdits`` が辞書の場合はそれを引き継ぐ.

    Args:
        data: 読み込んだJSONドキュメント

    Returns:
        変換後のドキュメント（辞書以外はそのまま返す）
    """
    if not isinstance(data, dict):
        return data
    if isinstance(data.get(_AUTO_ACCEPT_KEY), dict):
        return data

    legacy = data.get(_LEGACY_AUTO_ACCEPT_KEY)
    return {
        **data,
        _AUTO_ACCEPT_KEY: legacy if isinstance(legacy, dict) else {},
    }


class PreferenceStore:
    """Auto Accept 設定をJSONファイルに保存する."""

    def __init__(self, path: Path) -> None:
        """
        Initialize PreferenceStore.

        Args:
            path: 設定ファイルのパス
        """
        self._path = path

    @property
    def path(self) -> Path:
        """設定ファイルのパス."""
        return self._path

    def load(self) -> dict[str, bool]:
        """
        Auto Accept 設定を読み込む.

        ファイルが存在しない、または読み込めない場合は空の辞書を返す.

        Returns:
            キー → 自動承認するかどうか
        """
        if not self._path.exists():
            return {}

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            logger.warning(
                "Failed to read preferences file", path=str(self._path), exc_info=True
            )
            return {}

        data = migrate(data)
        if not isinstance(data, dict):
            logger.warning(
                "Preferences file must contain a JSON object", path=str(self._path)
            )
            return {}

        auto_accept = data.get(_AUTO_ACCEPT_KEY)
        if not isinstance(auto_accept, dict):
            return {}
        return {
            str(key): value
            for key, value in auto_accept.items()
            if isinstance(value, bool)
        }

    def save(self, auto_accept: dict[str, bool]) -> None:
        """
        Auto Accept 設定を保存する.

        Args:
            auto_accept: キー → 自動承認するかどうか

        Raises:
            OSError: ファイルへの書き込みに失敗した場合
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            content = json.dumps(
                {_AUTO_ACCEPT_KEY: auto_accept}, indent=2, ensure_ascii=False
            )
            self._path.write_text(content, encoding="utf-8")
        except OSError:
            logger.exception("Failed to write preferences file", path=str(self._path))
            raise

        logger.debug(
            "Saved preferences", path=str(self._path), entries=len(auto_accept)
        )
