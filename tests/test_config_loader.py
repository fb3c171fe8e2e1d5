"""Tests for the YAML config loader."""

import pytest

from salesdesk.config.loader import (
    get_listing_settings,
    get_log_level,
    get_server_settings,
    get_sqlite_path,
    load_config,
)


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Config file not found"):
        load_config(tmp_path / "absent.yaml")


def test_load_config_empty_file_is_empty_dict(tmp_path):
    path = tmp_path / "salesdesk.config.yaml"
    path.write_text("")
    assert load_config(path) == {}


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "salesdesk.config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="must be a dictionary"):
        load_config(path)


def test_defaults_apply_without_config():
    assert get_sqlite_path(None) == "salesdesk.db"
    assert get_listing_settings(None) == {
        "default_limit": 10,
        "max_limit": 1000,
        "read_timeout_seconds": 10.0,
    }
    assert get_server_settings(None) == {"host": "127.0.0.1", "port": 5000, "url_prefix": "/api"}
    assert get_log_level(None) == "INFO"


def test_partial_sections_merge_with_defaults(tmp_path):
    path = tmp_path / "salesdesk.config.yaml"
    path.write_text(
        "storage:\n  sqlite_path: data/sales.db\n"
        "listing:\n  default_limit: 20\n"
        "server:\n  url_prefix: /v1/\n"
        "logging:\n  level: debug\n"
    )
    config = load_config(path)

    assert get_sqlite_path(config) == "data/sales.db"
    assert get_listing_settings(config)["default_limit"] == 20
    assert get_listing_settings(config)["max_limit"] == 1000
    assert get_server_settings(config)["url_prefix"] == "/v1"
    assert get_log_level(config) == "DEBUG"


@pytest.mark.parametrize(
    "listing",
    [
        {"default_limit": 0},
        {"default_limit": "10"},
        {"max_limit": -1},
        {"read_timeout_seconds": 0},
        {"default_limit": True},
        {"default_limit": 50, "max_limit": 20},
    ],
)
def test_invalid_listing_settings(listing):
    with pytest.raises(ValueError):
        get_listing_settings({"listing": listing})


def test_invalid_sections():
    with pytest.raises(ValueError):
        get_sqlite_path({"storage": {"sqlite_path": ""}})
    with pytest.raises(ValueError):
        get_server_settings({"server": {"url_prefix": "api"}})
    with pytest.raises(ValueError):
        get_listing_settings({"listing": ["not", "a", "dict"]})
