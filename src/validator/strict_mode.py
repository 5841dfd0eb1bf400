"""Strict mode policy: which discrepancy kinds are reported."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from common.errors import ConfigurationError

_CONFIG_KEYS = {
    "version_mismatch": "version_mismatch",
    "version": "version_mismatch",
    "missing": "missing",
    "extra": "extra",
}


@dataclass(frozen=True)
class StrictMode:
    """Per-kind switches; a disabled kind is not reported at all."""

    version_mismatch: bool = True
    missing: bool = True
    extra: bool = True

    def is_strict_on_version_mismatch(self) -> bool:
        return self.version_mismatch

    def is_strict_on_missing(self) -> bool:
        return self.missing

    def is_strict_on_extra(self) -> bool:
        return self.extra

    @classmethod
    def lenient(cls) -> "StrictMode":
        return cls(version_mismatch=False, missing=False, extra=False)

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> "StrictMode":
        """Build a policy from the ``strict_mode`` config mapping.

        A bare boolean switches every kind at once. Unknown keys and
        non-boolean values raise ConfigurationError.
        """
        if config is None:
            return cls()
        if isinstance(config, bool):
            return cls(version_mismatch=config, missing=config, extra=config)
        if not isinstance(config, Mapping):
            raise ConfigurationError("strict_mode must be a boolean or a mapping")

        values = {}
        for key, value in config.items():
            field_name = _CONFIG_KEYS.get(str(key).lower())
            if field_name is None:
                raise ConfigurationError(f"Unknown strict_mode option: {key}")
            if not isinstance(value, bool):
                raise ConfigurationError(f"strict_mode.{key} must be true or false")
            values[field_name] = value
        return cls(**values)
