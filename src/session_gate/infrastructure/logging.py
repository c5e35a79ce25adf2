"""Structured logging configuration."""

from __future__ import annotations

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import structlog

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def configure_logging(
    log_level: str = "INFO",
    log_dir: str = "logs",
    log_backup_count: int = 7,
) -> None:
    """
    構造化ロギングを設定する.

    3つの出力先にログを配信する:
    - コンソール (stderr): ERROR以上
    - logs/latest.log: log_level以上
    - logs/error.log: WARNING以上

    Args:
        log_level: latest.log に出力する最低レベル（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        log_dir: ログ出力ディレクトリ
        log_backup_count: ログローテーションの保持日数
    """
    log_level_upper = log_level.upper()
    if log_level_upper not in _VALID_LEVELS:
        print(
            f"Warning: Invalid log level '{log_level}', defaulting to INFO",
            file=sys.stderr,
        )
        log_level_upper = "INFO"

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # JSONフォーマッター
    json_formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ],
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    # 1. コンソールハンドラー (stderr, ERROR以上)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.ERROR)
    console_handler.setFormatter(json_formatter)
    root_logger.addHandler(console_handler)

    log_path = Path(log_dir)
    try:
        log_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(
            f"Warning: Failed to create log directory '{log_dir}': {e}. "
            "Falling back to console-only logging.",
            file=sys.stderr,
        )
        return

    # 2. latest.log: log_level以上、日次ローテーション
    latest_handler = TimedRotatingFileHandler(
        log_path / "latest.log",
        when="midnight",
        backupCount=log_backup_count,
        encoding="utf-8",
    )
    latest_handler.suffix = "%Y-%m-%d"
    latest_handler.setLevel(getattr(logging, log_level_upper))
    latest_handler.setFormatter(json_formatter)
    root_logger.addHandler(latest_handler)

    # 3. error.log: WARNING以上、日次ローテーション
    error_handler = TimedRotatingFileHandler(
        log_path / "error.log",
        when="midnight",
        backupCount=log_backup_count,
        encoding="utf-8",
    )
    error_handler.suffix = "%Y-%m-%d"
    error_handler.setLevel(logging.WARNING)
    error_handler.setFormatter(json_formatter)
    root_logger.addHandler(error_handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    構造化ロガーを取得する.

    Args:
        name: ロガー名（通常は __name__ を指定）

    Returns:
        構造化ロガー
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
