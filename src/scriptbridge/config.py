"""Converter configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigError

logger = logging.getLogger(__name__)


class StringLength(Enum):
    """Unit used when taking the length of a wrapped string."""
    CODEPOINTS = "codepoints"
    UTF8 = "utf8"


class NullIndex(Enum):
    """What indexing returns for a null element."""
    NIL = "nil"
    WRAPPED = "wrapped"


@dataclass(frozen=True)
class BridgeConfig:
    """Behavior switches for a Converter. The defaults need no file."""

    string_length: StringLength = StringLength.CODEPOINTS
    null_index_result: NullIndex = NullIndex.NIL
    string_ordering: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BridgeConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        if "string_length" in data:
            kwargs["string_length"] = _enum_value(StringLength, "string_length", data["string_length"])
        if "null_index_result" in data:
            kwargs["null_index_result"] = _enum_value(NullIndex, "null_index_result", data["null_index_result"])
        if "string_ordering" in data:
            flag = data["string_ordering"]
            if not isinstance(flag, bool):
                raise ConfigError("string_ordering must be true or false")
            kwargs["string_ordering"] = flag
        return cls(**kwargs)

    def to_mapping(self) -> dict[str, Any]:
        return {
            "string_length": self.string_length.value,
            "null_index_result": self.null_index_result.value,
            "string_ordering": self.string_ordering,
        }


def _enum_value(enum_cls, key: str, raw: Any):
    try:
        return enum_cls(raw)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"{key} must be one of: {choices} (got {raw!r})") from None


def load_config(path: Path | str) -> BridgeConfig:
    """Load a configuration document (YAML, or JSON for `.json` files)."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"configuration not found: {config_path}")
    with config_path.open("r", encoding="utf-8") as fp:
        if config_path.suffix == ".json":
            data = json.load(fp)
        else:
            import yaml

            data = yaml.safe_load(fp) or {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"{config_path}: configuration must be a mapping")
    logger.debug("loaded bridge configuration from %s", config_path)
    return BridgeConfig.from_mapping(data)
