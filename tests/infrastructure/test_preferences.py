"""Tests for auto-accept preference persistence."""

from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003

import pytest

from session_gate.infrastructure.preferences import PreferenceStore, migrate


@pytest.fixture
def preferences_file(tmp_path: Path) -> Path:
    """一時的な設定ファイルのパス."""
    return tmp_path / "permission.json"


class TestMigrate:
    """migrate のテスト."""

    def test_current_format_unchanged(self) -> None:
        """autoAccept を持つドキュメントはそのまま."""
        data = {"autoAccept": {"ses_1": True}, "autoAcceptEdits": {"ses_2": True}}
        assert migrate(data) is data

    def test_empty_auto_accept_is_current(self) -> None:
        """空の autoAccept も現在の形式として扱う."""
        data = {"autoAccept": {}, "autoAcceptEdits": {"ses_2": True}}
        assert migrate(data) is data

    def test_legacy_edits_are_carried_over(self) -> None:
        """autoAcceptEdits を autoAccept に引き継ぐ."""
        migrated = migrate({"autoAcceptEdits": {"ses_1": True}})
        assert migrated["autoAccept"] == {"ses_1": True}

    def test_invalid_legacy_becomes_empty(self) -> None:
        """autoAcceptEdits が辞書でなければ空の設定になる."""
        assert migrate({"autoAcceptEdits": ["ses_1"]})["autoAccept"] == {}
        assert migrate({})["autoAccept"] == {}

    def test_non_object_passthrough(self) -> None:
        """辞書以外はそのまま返す."""
        assert migrate([1, 2]) == [1, 2]
        assert migrate(None) is None


class TestPreferenceStore:
    """PreferenceStore のテスト."""

    def test_load_missing_file(self, preferences_file: Path) -> None:
        """ファイルがなければ空の辞書を返す."""
        assert PreferenceStore(preferences_file).load() == {}

    def test_save_and_load(self, preferences_file: Path) -> None:
        """保存した設定を読み込める."""
        store = PreferenceStore(preferences_file)
        store.save({"L3RtcC9wcm9qZWN0/ses_1": False, "ses_2": True})

        assert store.load() == {"L3RtcC9wcm9qZWN0/ses_1": False, "ses_2": True}
        data = json.loads(preferences_file.read_text(encoding="utf-8"))
        assert data == {
            "autoAccept": {"L3RtcC9wcm9qZWN0/ses_1": False, "ses_2": True}
        }

    def test_save_creates_parent_directory(self, tmp_path: Path) -> None:
        """親ディレクトリが存在しなくても保存できる."""
        path = tmp_path / "nested" / "dir" / "permission.json"
        PreferenceStore(path).save({"ses_1": True})
        assert path.exists()

    def test_load_legacy_document(self, preferences_file: Path) -> None:
        """旧形式のドキュメントを読み込める."""
        preferences_file.write_text(
            json.dumps({"autoAcceptEdits": {"ses_1": True}}), encoding="utf-8"
        )
        assert PreferenceStore(preferences_file).load() == {"ses_1": True}

    def test_load_invalid_json(self, preferences_file: Path) -> None:
        """不正なJSONは空の辞書として扱う."""
        preferences_file.write_text("{ invalid json }", encoding="utf-8")
        assert PreferenceStore(preferences_file).load() == {}

    def test_load_non_object(self, preferences_file: Path) -> None:
        """オブジェクト以外は空の辞書として扱う."""
        preferences_file.write_text(json.dumps(["ses_1"]), encoding="utf-8")
        assert PreferenceStore(preferences_file).load() == {}

    def test_load_drops_non_bool_values(self, preferences_file: Path) -> None:
        """真偽値以外の値は無視する."""
        preferences_file.write_text(
            json.dumps({"autoAccept": {"a": True, "b": "yes", "c": 1, "d": None}}),
            encoding="utf-8",
        )
        assert PreferenceStore(preferences_file).load() == {"a": True}

    def test_save_failure_raises(self, tmp_path: Path) -> None:
        """書き込みに失敗した場合は OSError を送出する."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = PreferenceStore(blocker / "permission.json")

        with pytest.raises(OSError):
            store.save({"ses_1": True})
