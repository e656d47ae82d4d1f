"""
Provides the `MacroConfig` class for MACROLANG tool settings.

Settings are read from a JSON object such as:

    {"macro_dir": "~/macros", "strict": true, "indent": 4}

Keys:
    - macro_dir (str): Directory listed by `macrolang --list`. Default "macros".
    - strict (bool): Parse in strict mode. Default false.
    - indent (int): Spaces per block level in formatted output. Default 2.

Classes:
    - MacroConfig: Validated settings.
    - ConfigError: Raised when a configuration cannot be loaded or is invalid.
"""

import json
from typing import Any


class ConfigError(Exception):
    """Raised for unreadable or invalid configuration.

    Attributes:
        problems (list[str]): One entry per invalid or unknown key.

    Example:
        raise ConfigError("Invalid configuration", ["'indent' must be int, got str"])
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or []


class MacroConfig:
    """Settings for the MACROLANG command line tools."""

    # key -> (expected type, default)
    FIELDS: dict[str, tuple[type, Any]] = {
        "macro_dir": (str, "macros"),
        "strict": (bool, False),
        "indent": (int, 2),
    }

    def __init__(self, macro_dir: str = "macros", strict: bool = False, indent: int = 2) -> None:
        self.macro_dir = macro_dir
        self.strict = strict
        self.indent = indent

    def __repr__(self) -> str:
        return (
            f"MacroConfig(macro_dir={self.macro_dir!r}, strict={self.strict}, indent={self.indent})"
        )

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, MacroConfig) and self.to_dict() == other.to_dict()

    @classmethod
    def from_dict(cls, data: Any) -> "MacroConfig":
        """Builds a config from a decoded JSON object.

        Raises:
            ConfigError: If `data` is not a dict, has unknown keys, or has
                values of the wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")

        problems: list[str] = []
        values: dict[str, Any] = {}
        for key, val in data.items():
            if key not in cls.FIELDS:
                problems.append(f"Unknown key {key!r}")
                continue
            expected, _ = cls.FIELDS[key]
            # bool is a subclass of int; don't accept it for indent
            if not isinstance(val, expected) or (expected is int and isinstance(val, bool)):
                problems.append(f"{key!r} must be {expected.__name__}, got {type(val).__name__}")
                continue
            values[key] = val

        if "indent" in values and values["indent"] < 0:
            problems.append("'indent' must not be negative")

        if problems:
            raise ConfigError("Invalid configuration", problems)
        return cls(**values)

    @classmethod
    def from_file(cls, path: str) -> "MacroConfig":
        """Loads a config from a JSON file.

        Raises:
            ConfigError: If the file cannot be read, is not valid JSON, or fails validation.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load config file: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return {"macro_dir": self.macro_dir, "strict": self.strict, "indent": self.indent}


__all__ = ["ConfigError", "MacroConfig"]
