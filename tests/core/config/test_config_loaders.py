"""Tests for ConfigStore loading, migration and saving."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from cc_switch.core.config import (
    AppType,
    ConfigStore,
    MultiAppConfig,
    list_backups,
    load_config,
    restore_from_backup,
    save_config,
)
from cc_switch.core.exceptions import ConfigIOError, SchemaUnrecognizedError


def _read(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


class TestLoadMissing:
    """Loading when no config file exists."""

    def test_defaults(self, config_path: Path) -> None:
        """A fresh install yields version 2, both apps and empty MCP slots."""
        config = ConfigStore(config_path).load()

        assert config.version == 2
        assert config.get_manager(AppType.CLAUDE) is not None
        assert config.get_manager(AppType.CODEX) is not None
        assert config.mcp.claude.servers == {}
        assert config.mcp.codex.servers == {}

    def test_defaults_not_written(self, config_path: Path) -> None:
        """Loading never creates the file."""
        ConfigStore(config_path).load()
        assert not config_path.exists()


class TestLoadV2:
    """Loading documents already in the multi-app layout."""

    def test_loads_document(self, config_path: Path, write_json, v2_document) -> None:
        """All sections are read from disk."""
        write_json(config_path, v2_document)

        config = ConfigStore(config_path).load()

        assert config.to_document() == v2_document

    def test_load_does_not_rewrite(self, config_path: Path, write_json, v2_document) -> None:
        """A current-version document is not saved on load."""
        write_json(config_path, v2_document)
        before = config_path.read_bytes()

        ConfigStore(config_path).load()

        assert config_path.read_bytes() == before
        assert ConfigStore(config_path).list_backups() == []

    def test_missing_app_is_ensured(self, config_path: Path, write_json, v2_document) -> None:
        """A document lacking codex still comes back with both apps."""
        del v2_document["codex"]
        write_json(config_path, v2_document)

        config = ConfigStore(config_path).load()

        assert config.get_manager(AppType.CODEX) is not None
        assert config.get_manager(AppType.CLAUDE).current == "anthropic"

    def test_extra_apps_kept(self, config_path: Path, write_json, v2_document) -> None:
        """Unknown app ids survive a load/save cycle."""
        v2_document["gemini"] = {"providers": {"g": {"id": "g"}}, "current": "g"}
        write_json(config_path, v2_document)
        store = ConfigStore(config_path)

        store.save(store.load())

        assert _read(config_path)["gemini"] == v2_document["gemini"]

    def test_old_version_is_bumped(self, config_path: Path, write_json, v2_document) -> None:
        """A v2-shaped document with version 1 is upgraded and saved."""
        v2_document["version"] = 1
        write_json(config_path, v2_document)

        config = ConfigStore(config_path).load()

        assert config.version == 2
        assert _read(config_path)["version"] == 2
        backups = ConfigStore(config_path).list_backups()
        assert len(backups) == 1
        assert _read(backups[0].path)["version"] == 1

    @pytest.mark.parametrize(
        "raw",
        [
            [],
            42,
            {"version": "two"},
            {"claude": ["not", "a", "registry"]},
        ],
    )
    def test_unrecognized_shape(self, config_path: Path, write_json, raw: Any) -> None:
        """Valid JSON that is neither v1 nor v2 is reported, not replaced."""
        write_json(config_path, raw)

        with pytest.raises(SchemaUnrecognizedError) as exc_info:
            ConfigStore(config_path).load()

        assert exc_info.value.path == config_path
        assert _read(config_path) == raw


class TestLoadV1:
    """Loading and migrating single-app documents."""

    def test_migrates(self, config_path: Path, write_json, v1_document) -> None:
        """Providers move under claude, codex starts empty."""
        write_json(config_path, v1_document)

        config = ConfigStore(config_path).load()

        assert config.version == 2
        claude = config.get_manager(AppType.CLAUDE)
        assert claude is not None
        assert claude.current == "anthropic"
        assert set(claude.providers) == {"anthropic", "relay"}
        assert config.get_manager(AppType.CODEX).providers == {}

    def test_writes_v2_and_keeps_raw_copy(
        self, config_path: Path, write_json, v1_document
    ) -> None:
        """The file is rewritten as v2 and the raw v1 file is set aside."""
        write_json(config_path, v1_document)
        raw_before = config_path.read_bytes()

        ConfigStore(config_path).load()

        on_disk = _read(config_path)
        assert on_disk["version"] == 2
        assert on_disk["claude"] == v1_document
        assert on_disk["codex"] == {"providers": {}, "current": ""}
        assert "providers" not in on_disk

        sidecars = list(config_path.parent.glob("config.v1.backup.*.json"))
        assert len(sidecars) == 1
        assert sidecars[0].read_bytes() == raw_before

    def test_migration_also_takes_rotating_backup(
        self, config_path: Path, write_json, v1_document
    ) -> None:
        """The save after migration goes through safe-save."""
        write_json(config_path, v1_document)

        store = ConfigStore(config_path)
        store.load()

        backups = store.list_backups()
        assert len(backups) == 1
        assert _read(backups[0].path) == v1_document

    def test_second_load_does_not_migrate_again(
        self, config_path: Path, write_json, v1_document
    ) -> None:
        """Migration is one-shot."""
        write_json(config_path, v1_document)
        store = ConfigStore(config_path)
        first = store.load()
        after_migration = config_path.read_bytes()

        second = store.load()

        assert second == first
        assert config_path.read_bytes() == after_migration
        assert len(list(config_path.parent.glob("config.v1.backup.*.json"))) == 1

    def test_sidecar_failure_does_not_block(
        self, config_path: Path, tmp_path: Path, write_json, v1_document
    ) -> None:
        """If the raw copy fails migration still completes."""
        write_json(config_path, v1_document)
        unwritable = tmp_path / "missing-dir" / "config.v1.backup.1.json"

        with patch("cc_switch.core.config.migration.v1_backup_path", return_value=unwritable):
            config = ConfigStore(config_path).load()

        assert not unwritable.exists()
        assert config.version == 2
        assert config.get_manager(AppType.CLAUDE).current == "anthropic"
        assert _read(config_path)["version"] == 2
        store = ConfigStore(config_path)
        assert len(store.list_backups()) == 1
        assert _read(store.list_backups()[0].path) == v1_document

    def test_failed_save_keeps_v1_file(
        self, config_path: Path, write_json, v1_document
    ) -> None:
        """A migration whose save fails leaves the v1 file in place."""
        write_json(config_path, v1_document)
        store = ConfigStore(config_path)

        with patch(
            "cc_switch.core.io.os.replace", side_effect=OSError("read-only filesystem")
        ):
            with pytest.raises(ConfigIOError):
                store.load()

        assert _read(config_path) == v1_document


class TestLoadCorrupted:
    """Loading when the live file is not valid JSON."""

    def test_restores_from_backup(self, config_path: Path, v2_document) -> None:
        """A corrupt file is replaced by the newest valid backup."""
        store = ConfigStore(config_path)
        good = MultiAppConfig.from_document(v2_document)
        store.save(good)
        store.save(good)
        config_path.write_text("{\"version\": 2, \"claude\": ", encoding="utf-8")

        config = store.load()

        assert config.to_document() == v2_document
        assert _read(config_path) == v2_document

    def test_keeps_corrupt_file_as_emergency_copy(self, config_path: Path, v2_document) -> None:
        """The corrupt bytes are preserved before restoring."""
        store = ConfigStore(config_path)
        good = MultiAppConfig.from_document(v2_document)
        store.save(good)
        store.save(good)
        config_path.write_text("garbage", encoding="utf-8")

        store.load()

        emergency = config_path.with_name("config.emergency_backup.json")
        assert emergency.read_text(encoding="utf-8") == "garbage"

    def test_restored_v1_backup_is_migrated(
        self, config_path: Path, write_json, v1_document
    ) -> None:
        """Recovery feeds back into the normal load path."""
        write_json(config_path, v1_document)
        store = ConfigStore(config_path)
        store.load()
        config_path.write_text("garbage", encoding="utf-8")

        config = store.load()

        assert config.get_manager(AppType.CLAUDE).current == "anthropic"
        assert _read(config_path)["version"] == 2

    def test_no_backup_gives_defaults(self, config_path: Path) -> None:
        """Without backups the caller gets defaults, never the garbage."""
        config_path.write_text("definitely not json", encoding="utf-8")

        config = ConfigStore(config_path).load()

        assert config == MultiAppConfig()
        assert config_path.read_text(encoding="utf-8") == "definitely not json"

    def test_only_corrupt_backups_gives_defaults(self, config_path: Path) -> None:
        """Unusable backups count as no backups."""
        store = ConfigStore(config_path)
        store.save(MultiAppConfig())
        store.save(MultiAppConfig())
        for backup in store.list_backups():
            backup.path.write_text("broken", encoding="utf-8")
        config_path.write_text("broken", encoding="utf-8")

        assert store.load() == MultiAppConfig()


class TestSave:
    """Saving through ConfigStore."""

    def test_round_trip(self, config_path: Path) -> None:
        """What is saved is what is loaded back."""
        store = ConfigStore(config_path)
        config = store.load()
        config.get_manager(AppType.CODEX).providers["openai"] = {"id": "openai", "name": "OpenAI"}
        config.get_manager(AppType.CODEX).current = "openai"
        config.mcp_for(AppType.CLAUDE).servers["fs"] = {"enabled": True}

        store.save(config)

        assert store.load() == config

    def test_first_save_has_no_backup(self, config_path: Path) -> None:
        """Nothing to back up on the first write."""
        assert ConfigStore(config_path).save(MultiAppConfig()) is None

    def test_backup_before_overwrite(self, config_path: Path) -> None:
        """Overwriting an existing file captures it first."""
        store = ConfigStore(config_path)
        first = MultiAppConfig()
        store.save(first)
        second = MultiAppConfig()
        second.get_manager(AppType.CLAUDE).current = "x"

        backup = store.save(second)

        assert backup is not None
        assert _read(backup.path) == first.to_document()
        assert store.list_backups()[0] == backup

    def test_retention_from_settings(self, isolated_config_dir: Path) -> None:
        """max_backups from settings.yaml caps the backup set."""
        (isolated_config_dir / "settings.yaml").write_text("max_backups: 2\n", encoding="utf-8")
        store = ConfigStore.from_settings()
        for n in range(6):
            config = MultiAppConfig()
            config.get_manager(AppType.CLAUDE).current = str(n)
            store.save(config)

        assert len(store.list_backups()) == 2

    def test_restore_from_backup(self, config_path: Path) -> None:
        """An explicit restore replaces the live file."""
        store = ConfigStore(config_path)
        first = MultiAppConfig()
        store.save(first)
        second = MultiAppConfig()
        second.ensure_app("gemini")
        backup = store.save(second)
        assert backup is not None

        store.restore_from_backup(backup.path)

        assert store.load() == first


class TestModuleFunctions:
    """Convenience functions resolving the default location."""

    def test_default_location_from_env(self, isolated_config_dir: Path) -> None:
        """Without a path the environment directory is used."""
        config = load_config()
        config.ensure_app("gemini")
        save_config(config)

        assert (isolated_config_dir / "config.json").exists()
        assert "gemini" in load_config().apps

    def test_explicit_path(self, tmp_path: Path) -> None:
        """An explicit path is honoured."""
        path = tmp_path / "custom" / "my-config.json"
        save_config(MultiAppConfig(), path)

        assert path.exists()
        assert load_config(path) == MultiAppConfig()

    def test_list_and_restore(self) -> None:
        """Backups can be listed and restored without a store handle."""
        first = MultiAppConfig()
        save_config(first)
        second = MultiAppConfig()
        second.get_manager(AppType.CODEX).current = "openai"
        save_config(second)

        backups = list_backups()
        assert len(backups) == 1

        restore_from_backup(backups[0].path)

        assert load_config() == first
