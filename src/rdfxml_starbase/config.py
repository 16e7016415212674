"""
Parser configuration.

Provides:
- ParserConfig dataclass with dict round-tripping
- Environment variable loading (RDFXML_*)
- Configuration validation
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from rdfxml_starbase.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


OUTPUT_FORMATS = ("ntriples", "nquads", "csv", "parquet")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _parse_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigValidationError(f"{name} must be a boolean, got {value!r}")


def _coerce_bool(value: Any, name: str) -> bool:
    if isinstance(value, str):
        return _parse_bool(value, name)
    return bool(value)


@dataclass
class ParserConfig:
    """Settings for a parse run."""
    reify: bool = False
    base: str = ""
    output_format: str = "ntriples"
    log_level: str = "WARNING"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reify": self.reify,
            "base": self.base,
            "output_format": self.output_format,
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        return cls(
            reify=_coerce_bool(data.get("reify", False), "reify"),
            base=data.get("base", ""),
            output_format=data.get("output_format", "ntriples"),
            log_level=str(data.get("log_level", "WARNING")).upper(),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ParserConfig":
        """
        Load configuration from RDFXML_REIFY, RDFXML_BASE, RDFXML_FORMAT and
        RDFXML_LOG_LEVEL. Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        config = cls()
        if "RDFXML_REIFY" in env:
            config.reify = _parse_bool(env["RDFXML_REIFY"], "RDFXML_REIFY")
        if "RDFXML_BASE" in env:
            config.base = env["RDFXML_BASE"]
        if "RDFXML_FORMAT" in env:
            config.output_format = env["RDFXML_FORMAT"].strip().lower()
        if "RDFXML_LOG_LEVEL" in env:
            config.log_level = env["RDFXML_LOG_LEVEL"].strip().upper()
        config.validate()
        logger.debug(f"Loaded parser config from environment: {config.to_dict()}")
        return config

    def merged(self, **overrides: Any) -> "ParserConfig":
        """Copy with every non-None override applied."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return ParserConfig.from_dict(data)

    def errors(self) -> List[str]:
        errors = []
        if self.output_format not in OUTPUT_FORMATS:
            errors.append(
                f"output_format must be one of {', '.join(OUTPUT_FORMATS)}, got {self.output_format!r}"
            )
        if self.log_level not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")
        if self.base and ":" not in self.base:
            errors.append(f"base must be an absolute URI, got {self.base!r}")
        return errors

    def validate(self) -> None:
        """
        Raises:
            ConfigValidationError: If any setting is invalid
        """
        errors = self.errors()
        if errors:
            raise ConfigValidationError("; ".join(errors))
