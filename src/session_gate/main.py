"""Command-line entry point for inspecting a session snapshot."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from session_gate.application.composer import compute_blocked_state
from session_gate.application.models import (
    PermissionRequest,
    QuestionRequest,
    Session,
)
from session_gate.infrastructure.config import get_config
from session_gate.infrastructure.logging import configure_logging, get_logger
from session_gate.infrastructure.preferences import PreferenceStore


class Snapshot(BaseModel):
    """セッションと保留中要求のスナップショット."""

    sessions: list[Session] = Field(default_factory=list)
    permissions: dict[str, list[PermissionRequest] | None] = Field(default_factory=dict)
    questions: dict[str, list[QuestionRequest] | None] = Field(default_factory=dict)


def load_snapshot(path: Path) -> Snapshot:
    """
    スナップショットファイルを読み込む.

    Args:
        path: JSONファイルのパス

    Returns:
        読み込んだスナップショット

    Raises:
        OSError: ファイルを読み込めない場合
        pydantic.ValidationError: 内容が不正な場合
    """
    return Snapshot.model_validate_json(path.read_text(encoding="utf-8"))


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="session-gate",
        description="Show which pending request blocks a session.",
    )
    parser.add_argument("snapshot", type=Path, help="snapshot JSON file")
    parser.add_argument("--session", required=True, help="session ID to inspect")
    parser.add_argument("--directory", default=None, help="project directory")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """アプリケーションのメインエントリポイント."""
    args = _parse_args(argv)

    # 設定を読み込み（ロギング設定より前に必要）
    config = get_config()
    configure_logging(
        log_level=config.log_level,
        log_dir=config.log_dir,
        log_backup_count=config.log_backup_count,
    )

    try:
        return _run(args, config.preferences_file)
    finally:
        # ログのフラッシュと確実なクローズ
        logging.shutdown()


def _run(args: argparse.Namespace, preferences_file: Path) -> int:
    logger = get_logger(__name__)
    try:
        snapshot = load_snapshot(args.snapshot)
    except (OSError, ValidationError):
        logger.exception("Failed to load snapshot", path=str(args.snapshot))
        return 1

    auto_accept = PreferenceStore(preferences_file).load()
    state = compute_blocked_state(
        snapshot.sessions,
        snapshot.permissions,
        snapshot.questions,
        auto_accept,
        args.session,
        args.directory,
    )
    logger.info(
        "Computed blocked state",
        session_id=args.session,
        blocked=state.blocked,
    )

    print(
        json.dumps(
            {
                "blocked": state.blocked,
                "permission": state.permission.id if state.permission else None,
                "question": state.question.id if state.question else None,
            },
            indent=2,
        )
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
