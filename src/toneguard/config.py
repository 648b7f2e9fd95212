"""Configuration loader for toneguard.

Loads from toneguard.toml with sensible defaults when file is absent.
Configuration is loaded once at startup and passed via dependency injection;
service credentials are handed to the transport explicitly.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""


_VALID_SERVICE_MODES = {"chat", "function"}


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 9100


@dataclass(frozen=True)
class ServiceConfig:
    """Connection settings for the external tone-scoring service."""

    mode: str = "chat"  # "chat" (OpenAI-compatible) | "function" (remote tone function)
    base_url: str = "https://ai.gateway.lovable.dev/v1"
    function_url: str = ""
    model: str = "google/gemini-2.5-flash"
    temperature: float = 0.7
    api_key: str = ""
    timeout_seconds: float = 60.0  # 0 = wait indefinitely

    @property
    def timeout(self) -> float | None:
        return self.timeout_seconds if self.timeout_seconds > 0 else None

    def __repr__(self) -> str:
        key_display = f"***{self.api_key[-4:]}" if self.api_key else ""
        return (
            f"ServiceConfig(mode={self.mode!r}, model={self.model!r}, "
            f"base_url={self.base_url!r}, function_url={self.function_url!r}, "
            f"api_key={key_display!r})"
        )


@dataclass(frozen=True)
class DefaultsConfig:
    language: str = "EN"
    audience: str = "general"
    content_medium: str = "email"


@dataclass(frozen=True)
class LiveConfig:
    debounce_ms: int = 300
    min_chars: int = 10


@dataclass(frozen=True)
class HistoryConfig:
    database_path: str = "~/.toneguard/toneguard.db"
    recent_limit: int = 5
    benchmark_catalog: str = ""  # empty = packaged catalog


@dataclass(frozen=True)
class SessionConfig:
    discard_stale_responses: bool = False
    strict_severity: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class Config:
    """Top-level toneguard configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    live: LiveConfig = field(default_factory=LiveConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def database_path(self) -> Path:
        return Path(self.history.database_path).expanduser()


def _positive_int(value: object, default: int) -> int:
    try:
        parsed = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _parse_service(data: dict) -> ServiceConfig:
    mode = str(data.get("mode", "chat")).strip().lower()
    if mode not in _VALID_SERVICE_MODES:
        raise ConfigError(
            f"Unknown service mode {mode!r}; expected one of "
            f"{sorted(_VALID_SERVICE_MODES)}"
        )
    try:
        timeout_seconds = float(data.get("timeout_seconds", 60.0))
        temperature = float(data.get("temperature", 0.7))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric value in [service]: {e}") from e
    return ServiceConfig(
        mode=mode,
        base_url=str(data.get("base_url", ServiceConfig.base_url)),
        function_url=str(data.get("function_url", "")),
        model=str(data.get("model", ServiceConfig.model)),
        temperature=temperature,
        api_key=str(data.get("api_key", "")),
        timeout_seconds=max(0.0, timeout_seconds),
    )


def find_config_path() -> Path | None:
    """Return the first existing toneguard.toml in the search order."""
    candidates = [
        Path.cwd() / "toneguard.toml",
        Path.home() / ".toneguard" / "toneguard.toml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from a TOML file.

    If path is None, searches for toneguard.toml in current directory then
    ~/.toneguard/. Returns default config if no file is found.
    """
    if path is None:
        path = find_config_path()

    if path is None or not path.exists():
        return Config()

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    server_data = raw.get("server", {})
    server = ServerConfig(
        host=server_data.get("host", "127.0.0.1"),
        port=server_data.get("port", 9100),
    )

    service = _parse_service(raw.get("service", {}))

    defaults_data = raw.get("defaults", {})
    defaults = DefaultsConfig(
        language=str(defaults_data.get("language", "EN")),
        audience=str(defaults_data.get("audience", "general")),
        content_medium=str(defaults_data.get("content_medium", "email")),
    )

    live_data = raw.get("live", {})
    live = LiveConfig(
        debounce_ms=_positive_int(live_data.get("debounce_ms", 300), 300),
        min_chars=_positive_int(live_data.get("min_chars", 10), 10),
    )

    history_data = raw.get("history", {})
    history = HistoryConfig(
        database_path=history_data.get("database_path", "~/.toneguard/toneguard.db"),
        recent_limit=_positive_int(history_data.get("recent_limit", 5), 5),
        benchmark_catalog=str(history_data.get("benchmark_catalog", "")),
    )

    session_data = raw.get("session", {})
    session = SessionConfig(
        discard_stale_responses=bool(
            session_data.get("discard_stale_responses", False)
        ),
        strict_severity=bool(session_data.get("strict_severity", False)),
    )

    log_data = raw.get("logging", {})
    logging_cfg = LoggingConfig(level=str(log_data.get("level", "INFO")).upper())

    return Config(
        server=server,
        service=service,
        defaults=defaults,
        live=live,
        history=history,
        session=session,
        logging=logging_cfg,
    )
