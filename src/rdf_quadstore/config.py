"""
Configuration for rdf-quadstore datasets.

Provides:
- Remote retrieval settings (FetchConfig)
- Parser policies (ParserConfig)
- Per-dataset configuration (DatasetConfig)
- Loading from dicts, JSON files and RDF_QUADSTORE_* environment variables
- Validation
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "RDF_QUADSTORE_"

DEFAULT_ACCEPT = "application/trig;q=1,text/turtle;q=0.8,application/ld+json;q=0.5"
DEFAULT_USER_AGENT = "rdf-quadstore/0.1"

_TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigValidationError(Exception):
    """Configuration validation error."""
    pass


def _as_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class FetchConfig:
    """Settings for retrieving remote documents."""
    timeout_seconds: float = 30.0
    verify_tls: bool = True
    accept: str = DEFAULT_ACCEPT
    user_agent: str = DEFAULT_USER_AGENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeout_seconds": self.timeout_seconds,
            "verify_tls": self.verify_tls,
            "accept": self.accept,
            "user_agent": self.user_agent,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FetchConfig":
        return cls(
            timeout_seconds=float(data.get("timeout_seconds", 30.0)),
            verify_tls=data.get("verify_tls", True),
            accept=data.get("accept", DEFAULT_ACCEPT),
            user_agent=data.get("user_agent", DEFAULT_USER_AGENT),
        )


@dataclass
class ParserConfig:
    """
    Parser policies.

    trig_strict: raise on the first TriG statement group that fails to
        parse instead of dropping it and carrying on.
    jsonld_preserve_graphs: keep named-graph membership when reading
        JSON-LD. Off by default, in which case every JSON-LD statement
        lands in the default graph.
    """
    trig_strict: bool = False
    jsonld_preserve_graphs: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trig_strict": self.trig_strict,
            "jsonld_preserve_graphs": self.jsonld_preserve_graphs,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        return cls(
            trig_strict=data.get("trig_strict", False),
            jsonld_preserve_graphs=data.get("jsonld_preserve_graphs", False),
        )


@dataclass
class DatasetConfig:
    """Complete configuration for a Dataset."""
    base_iri: str = ""
    fetch: FetchConfig = field(default_factory=FetchConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_iri": self.base_iri,
            "fetch": self.fetch.to_dict(),
            "parser": self.parser.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DatasetConfig":
        config = cls(
            base_iri=data.get("base_iri", ""),
            fetch=FetchConfig.from_dict(data.get("fetch", {})),
            parser=ParserConfig.from_dict(data.get("parser", {})),
        )
        validate_or_raise(config)
        return config

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DatasetConfig":
        """
        Build a configuration from RDF_QUADSTORE_* environment variables.

        Recognized: BASE_IRI, FETCH_TIMEOUT, VERIFY_TLS, USER_AGENT,
        TRIG_STRICT, JSONLD_PRESERVE_GRAPHS.
        """
        env = os.environ if environ is None else environ
        config = cls()

        def get(name: str) -> Optional[str]:
            return env.get(ENV_PREFIX + name)

        if get("BASE_IRI") is not None:
            config.base_iri = get("BASE_IRI")
        if get("FETCH_TIMEOUT") is not None:
            try:
                config.fetch.timeout_seconds = float(get("FETCH_TIMEOUT"))
            except ValueError:
                raise ConfigValidationError(
                    f"{ENV_PREFIX}FETCH_TIMEOUT must be a number, got {get('FETCH_TIMEOUT')!r}"
                )
        if get("VERIFY_TLS") is not None:
            config.fetch.verify_tls = _as_bool(get("VERIFY_TLS"))
        if get("USER_AGENT") is not None:
            config.fetch.user_agent = get("USER_AGENT")
        if get("TRIG_STRICT") is not None:
            config.parser.trig_strict = _as_bool(get("TRIG_STRICT"))
        if get("JSONLD_PRESERVE_GRAPHS") is not None:
            config.parser.jsonld_preserve_graphs = _as_bool(get("JSONLD_PRESERVE_GRAPHS"))

        validate_or_raise(config)
        return config

    def save(self, path: Path) -> None:
        """Save configuration as JSON."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "DatasetConfig":
        """Load configuration from a JSON file, or defaults if it does not exist."""
        path = Path(path)
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls.from_dict(data)
        logger.debug(f"No configuration at {path}, using defaults")
        return cls()


def validate(config: DatasetConfig) -> List[str]:
    """
    Validate configuration.

    Returns list of error messages (empty if valid).
    """
    errors = []

    if config.fetch.timeout_seconds <= 0:
        errors.append("fetch.timeout_seconds must be positive")

    if not config.fetch.accept.strip():
        errors.append("fetch.accept must not be empty")

    if not isinstance(config.fetch.verify_tls, bool):
        errors.append("fetch.verify_tls must be a boolean")

    for name in ("trig_strict", "jsonld_preserve_graphs"):
        if not isinstance(getattr(config.parser, name), bool):
            errors.append(f"parser.{name} must be a boolean")

    if config.base_iri and ":" not in config.base_iri:
        errors.append(f"base_iri must be an absolute IRI: {config.base_iri!r}")

    return errors


def validate_or_raise(config: DatasetConfig) -> None:
    """Validate configuration, raising on errors."""
    errors = validate(config)
    if errors:
        raise ConfigValidationError("; ".join(errors))
