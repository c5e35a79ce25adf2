"""Configuration management."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """アプリケーション設定."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Auto Accept 設定ファイルパス
    preferences_file: Path = Field(
        default=Path("permission.json"),
        description="Auto Accept 設定ファイルのパス",
    )

    # ロギング設定
    log_level: str = Field(
        default="INFO",
        description="ログレベル",
    )
    log_dir: str = Field(
        default="logs",
        description="ログ出力ディレクトリ",
    )
    log_backup_count: int = Field(
        default=7,
        ge=0,
        description="ログローテーションの保持日数",
    )

    # 自動応答の重複防止設定
    responded_ttl_seconds: float = Field(
        default=60 * 60,
        gt=0,
        description="応答済みパーミッションIDを保持する秒数",
    )
    max_responded: int = Field(
        default=1000,
        gt=0,
        description="応答済みパーミッションIDの最大保持件数",
    )

    @field_validator("preferences_file", mode="before")
    @classmethod
    def parse_preferences_file(cls, v: str | Path) -> Path:
        """preferences_fileをPathに変換する."""
        if isinstance(v, str):
            return Path(v)
        return v


# グローバル設定インスタンス（シングルトン）
_config: Config | None = None


def get_config() -> Config:
    """
    グローバル設定インスタンスを取得する.

    Returns:
        設定インスタンス
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
