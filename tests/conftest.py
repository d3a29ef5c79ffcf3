"""Pytest configuration and fixtures for cc-switch tests."""

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point CC_SWITCH_CONFIG_DIR at a temp directory for every test.

    Prevents tests from reading or writing ~/.cc-switch. Tests that need a
    specific location pass explicit paths instead.
    """
    config_dir = tmp_path / ".cc-switch"
    config_dir.mkdir()
    monkeypatch.setenv("CC_SWITCH_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def config_path(isolated_config_dir: Path) -> Path:
    """Live config path inside the isolated config directory (not created)."""
    return isolated_config_dir / "config.json"


@pytest.fixture
def write_json():
    """Write a JSON value to a path and return the path.

    Usage:
        def test_something(write_json, config_path):
            write_json(config_path, {"providers": {}})
    """

    def _write(path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def v1_document() -> dict[str, Any]:
    """Single-app (v1) provider registry as written by old releases."""
    return {
        "providers": {
            "anthropic": {
                "id": "anthropic",
                "name": "Anthropic Official",
                "settingsConfig": {"env": {"ANTHROPIC_AUTH_TOKEN": "sk-test"}},
                "websiteUrl": "https://www.anthropic.com",
            },
            "relay": {
                "id": "relay",
                "name": "Relay",
                "settingsConfig": {"env": {"ANTHROPIC_BASE_URL": "https://relay.example"}},
                "createdAt": 1735689600000,
            },
        },
        "current": "anthropic",
    }


@pytest.fixture
def v2_document(v1_document: dict[str, Any]) -> dict[str, Any]:
    """Multi-app (v2) document in its flattened on-disk layout."""
    return {
        "version": 2,
        "claude": v1_document,
        "codex": {
            "providers": {
                "openai": {
                    "id": "openai",
                    "name": "OpenAI",
                    "settingsConfig": {"auth": {"OPENAI_API_KEY": "sk-x"}, "config": ""},
                }
            },
            "current": "openai",
        },
        "mcp": {
            "claude": {"servers": {"fs": {"enabled": True, "source": "user"}}},
            "codex": {"servers": {}},
        },
    }
