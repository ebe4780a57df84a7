"""Tests for ORGNAV_<SECTION>_<KEY> environment overrides."""
from __future__ import annotations


class TestTryParseEnvValue:
    """_try_parse_env_value converts strings to typed values."""

    def test_json_list_parsed(self):
        from orgnav.config import _try_parse_env_value

        assert _try_parse_env_value('["a", "b"]') == ["a", "b"]

    def test_json_object_parsed(self):
        from orgnav.config import _try_parse_env_value

        assert _try_parse_env_value('{"key": "value"}') == {"key": "value"}

    def test_booleans(self):
        from orgnav.config import _try_parse_env_value

        assert _try_parse_env_value("true") is True
        assert _try_parse_env_value("TRUE") is True
        assert _try_parse_env_value("False") is False

    def test_integers(self):
        from orgnav.config import _try_parse_env_value

        assert _try_parse_env_value("8080") == 8080
        assert _try_parse_env_value("-1") == -1

    def test_malformed_integer_returns_string(self):
        from orgnav.config import _try_parse_env_value

        assert _try_parse_env_value("--5") == "--5"

    def test_plain_string_passthrough(self):
        from orgnav.config import _try_parse_env_value

        assert _try_parse_env_value("name") == "name"
        assert _try_parse_env_value("preserve-root-on-back") == "preserve-root-on-back"

    def test_malformed_json_returns_string(self):
        from orgnav.config import _try_parse_env_value

        assert _try_parse_env_value("[not json") == "[not json"


class TestApplyEnvOverrides:
    """_apply_env_overrides reads ORGNAV_ variables into known sections."""

    def test_override_known_key(self, monkeypatch):
        from orgnav.config import _apply_env_overrides

        monkeypatch.setenv("ORGNAV_SERVER_PORT", "9000")
        config = _apply_env_overrides({"server": {"port": 5050}})

        assert config["server"]["port"] == 9000

    def test_key_with_underscore(self, monkeypatch):
        from orgnav.config import _apply_env_overrides

        monkeypatch.setenv("ORGNAV_SOURCE_ID_FIELD", "internal_node_id")
        config = _apply_env_overrides({"source": {"id_field": "id"}})

        assert config["source"]["id_field"] == "internal_node_id"

    def test_unknown_section_ignored(self, monkeypatch):
        from orgnav.config import _apply_env_overrides

        monkeypatch.setenv("ORGNAV_NOPE_KEY", "x")
        config = _apply_env_overrides({"server": {}})

        assert config == {"server": {}}

    def test_load_config_applies_overrides(self, monkeypatch):
        from orgnav.config import load_config

        monkeypatch.setenv("ORGNAV_NAVIGATION_SELECTION_POLICY", "preserve-root-on-back")
        monkeypatch.setenv("ORGNAV_TREE_CHILD_ORDER", "name")

        config = load_config()

        assert config["navigation"]["selection_policy"] == "preserve-root-on-back"
        assert config["tree"]["child_order"] == "name"

    def test_invalid_override_rejected(self, monkeypatch):
        import pytest

        from orgnav.config import load_config
        from orgnav.errors import ConfigError

        monkeypatch.setenv("ORGNAV_SERVER_PORT", "not-a-port")

        with pytest.raises(ConfigError, match="server.port"):
            load_config()
