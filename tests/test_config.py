"""
Tests for converter configuration.
"""

import json
import pytest

from scriptbridge import BridgeConfig, StringLength, NullIndex, load_config
from scriptbridge.errors import ConfigError


class TestBridgeConfig:
    """Test configuration validation."""

    def test_defaults(self):
        """Defaults need no configuration file."""
        config = BridgeConfig()
        assert config.string_length == StringLength.CODEPOINTS
        assert config.null_index_result == NullIndex.NIL
        assert config.string_ordering is True

    def test_from_mapping(self):
        """Test building a configuration from a mapping."""
        config = BridgeConfig.from_mapping({
            "string_length": "utf8",
            "null_index_result": "wrapped",
            "string_ordering": False,
        })
        assert config.string_length == StringLength.UTF8
        assert config.null_index_result == NullIndex.WRAPPED
        assert config.string_ordering is False

    def test_round_trip(self):
        """to_mapping produces what from_mapping accepts."""
        config = BridgeConfig(string_length=StringLength.UTF8)
        assert BridgeConfig.from_mapping(config.to_mapping()) == config

    def test_unknown_key(self):
        """Unknown keys are rejected."""
        with pytest.raises(ConfigError, match="unknown configuration keys: bogus"):
            BridgeConfig.from_mapping({"bogus": 1})

    def test_bad_enum_value(self):
        """Enum settings list their choices."""
        with pytest.raises(ConfigError, match="string_length must be one of: codepoints, utf8"):
            BridgeConfig.from_mapping({"string_length": "bytes"})

    def test_bad_flag(self):
        """Flags must be booleans."""
        with pytest.raises(ConfigError, match="string_ordering must be true or false"):
            BridgeConfig.from_mapping({"string_ordering": "yes"})


class TestLoadConfig:
    """Test loading configuration documents."""

    def test_yaml(self, tmp_path):
        """YAML documents load through PyYAML."""
        path = tmp_path / "bridge.yaml"
        path.write_text("string_length: utf8\nnull_index_result: wrapped\n")
        config = load_config(path)
        assert config.string_length == StringLength.UTF8
        assert config.null_index_result == NullIndex.WRAPPED

    def test_json(self, tmp_path):
        """JSON documents load by suffix."""
        path = tmp_path / "bridge.json"
        path.write_text(json.dumps({"string_ordering": False}))
        assert load_config(str(path)).string_ordering is False

    def test_empty_document(self, tmp_path):
        """An empty document gives the defaults."""
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_config(path) == BridgeConfig()

    def test_missing_file(self, tmp_path):
        """A missing file is an error."""
        with pytest.raises(FileNotFoundError, match="configuration not found"):
            load_config(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path):
        """The document must be a mapping."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="configuration must be a mapping"):
            load_config(path)
