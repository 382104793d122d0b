"""Typed crawler configuration with JSON/YAML load/save helpers."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import quote

import yaml  # type: ignore

from .constants import (
    DEFAULT_CACHE_DIR,
    DEFAULT_CONCURRENCY,
    DEFAULT_ENABLE_CACHE,
    DEFAULT_HTTP_HEADERS,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_OUTPUT_MODE,
    DEFAULT_PROGRESS_INTERVAL_SECONDS,
    DEFAULT_PROXY_PORT,
    DEFAULT_RATE_LIMIT_SECONDS,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_BACKOFF_SECONDS,
    DEFAULT_SHUTDOWN_GRACE_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    JSON_INDENT,
    OUTPUT_MODES,
    SUPPORTED_CONFIG_SUFFIXES,
)
from .errors import ConfigurationError
from .types import JSONDict


def _as_float(value: Any, key: str) -> float:
    if value is None:
        raise ConfigurationError(f"Missing value for '{key}'")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid float for '{key}': {value!r}") from exc


def _as_int(value: Any, key: str) -> int:
    if value is None:
        raise ConfigurationError(f"Missing value for '{key}'")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid int for '{key}': {value!r}") from exc


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigurationError(f"Invalid bool for '{key}': {value!r}")


def _as_str_list(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    raise ConfigurationError(f"Invalid list for '{key}': {value!r}")


@dataclass(frozen=True, slots=True)
class ProxyConfig:
    """HTTP(S) proxy, optionally with basic auth credentials."""

    host: str
    port: int = DEFAULT_PROXY_PORT
    username: str | None = None
    password: str | None = None

    @property
    def url(self) -> str:
        auth = ""
        if self.username:
            auth = quote(self.username, safe="")
            if self.password:
                auth += ":" + quote(self.password, safe="")
            auth += "@"
        return f"http://{auth}{self.host}:{self.port}"

    def to_json(self) -> JSONDict:
        return {
            "host": self.host,
            "port": self.port,
            "username": self.username,
            "password": self.password,
        }

    @classmethod
    def from_value(cls, value: Any) -> "ProxyConfig | None":
        if value is None or isinstance(value, ProxyConfig):
            return value
        if not isinstance(value, Mapping):
            raise ConfigurationError(f"Invalid proxy config: {value!r}")

        host = str(value.get("host") or "").strip()
        if not host:
            return None

        port = value.get("port")
        return cls(
            host=host,
            port=DEFAULT_PROXY_PORT if port is None else _as_int(port, "proxy.port"),
            username=None if value.get("username") is None else str(value.get("username")),
            password=None if value.get("password") is None else str(value.get("password")),
        )


@dataclass(slots=True)
class CrawlConfig:
    """Top-level crawler configuration used by pipeline/discovery/fetcher."""

    base_url: str = ""
    package_filters: list[str] = field(default_factory=list)

    output_dir: Path = DEFAULT_OUTPUT_DIR
    output_mode: str = DEFAULT_OUTPUT_MODE

    concurrency: int = DEFAULT_CONCURRENCY
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    retries: int = DEFAULT_RETRIES
    retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS
    rate_limit_seconds: float = DEFAULT_RATE_LIMIT_SECONDS

    user_agent: str = DEFAULT_USER_AGENT
    default_headers: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HTTP_HEADERS))
    proxy: ProxyConfig | None = None

    enable_cache: bool = DEFAULT_ENABLE_CACHE
    cache_dir: Path = DEFAULT_CACHE_DIR

    progress_interval_seconds: float = DEFAULT_PROGRESS_INTERVAL_SECONDS
    shutdown_grace_seconds: float = DEFAULT_SHUTDOWN_GRACE_SECONDS

    # Replaces the built-in ranked candidate list when non-empty.
    entry_points: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.base_url = (self.base_url or "").strip()
        self.package_filters = [item.strip() for item in self.package_filters if item and item.strip()]
        self.entry_points = [item.strip() for item in self.entry_points if item and item.strip()]
        self.output_dir = Path(self.output_dir)
        self.cache_dir = Path(self.cache_dir)
        self.proxy = ProxyConfig.from_value(self.proxy)

        if self.output_mode not in OUTPUT_MODES:
            raise ConfigurationError(
                f"output_mode must be one of {OUTPUT_MODES}, got {self.output_mode!r}"
            )
        if self.concurrency <= 0:
            raise ConfigurationError("concurrency must be > 0")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be > 0")
        if self.retries < 0:
            raise ConfigurationError("retries must be >= 0")
        if self.retry_backoff_seconds < 0:
            raise ConfigurationError("retry_backoff_seconds must be >= 0")
        if self.rate_limit_seconds < 0:
            raise ConfigurationError("rate_limit_seconds must be >= 0")
        if self.progress_interval_seconds < 0:
            raise ConfigurationError("progress_interval_seconds must be >= 0")
        if self.shutdown_grace_seconds <= 0:
            raise ConfigurationError("shutdown_grace_seconds must be > 0")
        if self.proxy is not None and not 0 < self.proxy.port < 65536:
            raise ConfigurationError(f"Invalid proxy port: {self.proxy.port}")

        for pattern in self.package_filters:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ConfigurationError(f"Invalid package filter {pattern!r}: {exc}") from exc

    def headers(self) -> dict[str, str]:
        """Return request headers with the configured user agent applied."""

        merged: dict[str, str] = dict(self.default_headers)
        merged["User-Agent"] = self.user_agent
        return merged

    def proxies(self) -> dict[str, str] | None:
        """Return a `requests`-style proxies mapping, or None when unset."""

        if self.proxy is None:
            return None
        return {"http": self.proxy.url, "https": self.proxy.url}

    def to_dict(self) -> JSONDict:
        """Serialize config for saving and reproducibility."""

        return {
            "base_url": self.base_url,
            "package_filters": list(self.package_filters),
            "output_dir": str(self.output_dir),
            "output_mode": self.output_mode,
            "concurrency": self.concurrency,
            "timeout_seconds": self.timeout_seconds,
            "retries": self.retries,
            "retry_backoff_seconds": self.retry_backoff_seconds,
            "rate_limit_seconds": self.rate_limit_seconds,
            "user_agent": self.user_agent,
            "default_headers": dict(self.default_headers),
            "proxy": None if self.proxy is None else self.proxy.to_json(),
            "enable_cache": self.enable_cache,
            "cache_dir": str(self.cache_dir),
            "progress_interval_seconds": self.progress_interval_seconds,
            "shutdown_grace_seconds": self.shutdown_grace_seconds,
            "entry_points": list(self.entry_points),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CrawlConfig":
        """Build config from a parsed dictionary."""

        return cls(
            base_url=str(payload.get("base_url") or ""),
            package_filters=_as_str_list(payload.get("package_filters"), "package_filters"),
            output_dir=Path(str(payload.get("output_dir", DEFAULT_OUTPUT_DIR))),
            output_mode=str(payload.get("output_mode", DEFAULT_OUTPUT_MODE)),
            concurrency=_as_int(payload.get("concurrency", DEFAULT_CONCURRENCY), "concurrency"),
            timeout_seconds=_as_float(
                payload.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
                "timeout_seconds",
            ),
            retries=_as_int(payload.get("retries", DEFAULT_RETRIES), "retries"),
            retry_backoff_seconds=_as_float(
                payload.get("retry_backoff_seconds", DEFAULT_RETRY_BACKOFF_SECONDS),
                "retry_backoff_seconds",
            ),
            rate_limit_seconds=_as_float(
                payload.get("rate_limit_seconds", DEFAULT_RATE_LIMIT_SECONDS),
                "rate_limit_seconds",
            ),
            user_agent=str(payload.get("user_agent") or DEFAULT_USER_AGENT),
            default_headers={
                str(k): str(v)
                for k, v in dict(payload.get("default_headers") or DEFAULT_HTTP_HEADERS).items()
            },
            proxy=ProxyConfig.from_value(payload.get("proxy")),
            enable_cache=_as_bool(
                payload.get("enable_cache", DEFAULT_ENABLE_CACHE),
                "enable_cache",
            ),
            cache_dir=Path(str(payload.get("cache_dir") or DEFAULT_CACHE_DIR)),
            progress_interval_seconds=_as_float(
                payload.get("progress_interval_seconds", DEFAULT_PROGRESS_INTERVAL_SECONDS),
                "progress_interval_seconds",
            ),
            shutdown_grace_seconds=_as_float(
                payload.get("shutdown_grace_seconds", DEFAULT_SHUTDOWN_GRACE_SECONDS),
                "shutdown_grace_seconds",
            ),
            entry_points=_as_str_list(payload.get("entry_points"), "entry_points"),
        )


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"YAML config at {path} must be a mapping at top level")
    return data


def load_config(path: str | Path) -> CrawlConfig:
    """Load CrawlConfig from JSON/YAML path."""

    config_path = Path(path)
    suffix = config_path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        raise ConfigurationError(
            f"Unsupported config suffix '{suffix}'. Supported: {SUPPORTED_CONFIG_SUFFIXES}"
        )

    try:
        if suffix == ".json":
            payload = json.loads(config_path.read_text(encoding="utf-8"))
        else:
            payload = _load_yaml(config_path)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Malformed config file {config_path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigurationError(f"Config at {config_path} must be a mapping")

    return CrawlConfig.from_dict(payload)


def save_config(config: CrawlConfig, path: str | Path) -> None:
    """Save CrawlConfig as JSON or YAML based on file extension."""

    out_path = Path(path)
    suffix = out_path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        raise ConfigurationError(
            f"Unsupported config suffix '{suffix}'. Supported: {SUPPORTED_CONFIG_SUFFIXES}"
        )

    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = config.to_dict()

    if suffix == ".json":
        out_path.write_text(
            json.dumps(payload, indent=JSON_INDENT, sort_keys=True) + "\n",
            encoding="utf-8",
        )
        return

    out_path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")


__all__ = [
    "CrawlConfig",
    "ProxyConfig",
    "load_config",
    "save_config",
]
