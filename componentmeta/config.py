import os
import tomllib
from dataclasses import dataclass, fields
from typing import Optional, Tuple

from componentmeta.exceptions import ConfigError

CONFIG_ENV_VAR = "COMPONENTMETA_CONFIG"


@dataclass(frozen=True)
class ExtractorConfig:
    """Vocabularies the heuristic passes match against.

    Contract markers are case-sensitive substrings of a declaration name.
    """

    alias_contract_markers: Tuple[str, ...] = ("Props", "Field", "ComponentProps")
    interface_contract_markers: Tuple[str, ...] = ("Props", "props")
    class_helpers: Tuple[str, ...] = ("cn", "cx", "classNames", "className")
    class_attribute: str = "className"
    style_object: str = "styles"

    def is_alias_contract(self, name: str) -> bool:
        return any(marker in name for marker in self.alias_contract_markers)

    def is_interface_contract(self, name: str) -> bool:
        return any(marker in name for marker in self.interface_contract_markers)

    @classmethod
    def from_toml(cls, config_path: str) -> "ExtractorConfig":
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigError(f"Unable to read config {config_path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

        table = data.get("extractor", {})
        if not isinstance(table, dict):
            raise ConfigError(f"[extractor] in {config_path} must be a table")

        known = {f.name: f for f in fields(cls)}
        unknown = set(table) - set(known)
        if unknown:
            raise ConfigError(f"Unknown extractor settings in {config_path}: {sorted(unknown)}")

        values = {}
        for key, value in table.items():
            if isinstance(known[key].default, tuple):
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"'{key}' must be a list of strings")
                values[key] = tuple(value)
            else:
                if not isinstance(value, str) or not value:
                    raise ConfigError(f"'{key}' must be a non-empty string")
                values[key] = value
        return cls(**values)


DEFAULT_CONFIG = ExtractorConfig()


def load_config(config_path: Optional[str] = None) -> ExtractorConfig:
    config_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if not config_path:
        return DEFAULT_CONFIG
    return ExtractorConfig.from_toml(config_path)
