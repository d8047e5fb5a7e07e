"""Configuration loading for madeindex (.madeindex.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".madeindex.yml"
DEFAULT_NAMESPACE = "made"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SourcesConfig:
    """Extra candidate sub-paths tried before the built-in source locations."""

    token_stylesheets: List[str] = field(default_factory=list)
    token_json: List[str] = field(default_factory=list)
    utility_stylesheets: List[str] = field(default_factory=list)
    story_roots: List[str] = field(default_factory=list)


@dataclass
class ServiceConfig:
    """Bind settings for the HTTP front-end."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class LoggingConfig:
    """Log verbosity and optional file sink."""

    verbose: bool = False
    log_file: Optional[Path] = None


@dataclass
class MadeIndexConfig:
    """Represents the settings defined in .madeindex.yml."""

    root: Path
    namespace: str = DEFAULT_NAMESPACE
    repo_path: Optional[Path] = None
    index_dir: Optional[Path] = None
    cache_dir: Optional[Path] = None
    max_index_age_hours: float = 24.0
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        data_dir = self.root / "data"
        if self.index_dir is None:
            self.index_dir = data_dir / "indexes"
        if self.cache_dir is None:
            self.cache_dir = data_dir / "cache"
        if self.repo_path is None:
            self.repo_path = data_dir / f"{self.namespace}-repo"


def load_config(config_path: Path) -> MadeIndexConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return MadeIndexConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    namespace = _as_str(data.get("namespace")) or DEFAULT_NAMESPACE
    namespace = namespace.strip().strip("-") or DEFAULT_NAMESPACE

    data_dir_str = _as_str(data.get("data_dir"))
    data_dir = _resolve_path(root, data_dir_str) if data_dir_str else root / "data"
    index_dir = _resolve_path(root, _as_str(data.get("index_dir"))) or data_dir / "indexes"
    cache_dir = _resolve_path(root, _as_str(data.get("cache_dir"))) or data_dir / "cache"
    repo_path = _resolve_path(root, _as_str(data.get("repo_path"))) or data_dir / f"{namespace}-repo"

    max_age = _as_float(data.get("max_index_age_hours"))
    if max_age is None or max_age <= 0:
        max_age = 24.0

    sources = SourcesConfig()
    sources_data = _as_dict(data.get("sources"))
    if sources_data:
        sources.token_stylesheets = _as_str_list(sources_data.get("token_stylesheets"))
        sources.token_json = _as_str_list(sources_data.get("token_json"))
        sources.utility_stylesheets = _as_str_list(sources_data.get("utility_stylesheets"))
        sources.story_roots = _as_str_list(sources_data.get("story_roots"))

    service = ServiceConfig()
    service_data = _as_dict(data.get("service"))
    if service_data:
        service.host = _as_str(service_data.get("host")) or service.host
        port = _as_int(service_data.get("port"))
        if port is not None:
            if not 0 < port < 65536:
                raise ConfigError(f"service.port out of range: {port}")
            service.port = port

    logging_config = LoggingConfig()
    logging_data = _as_dict(data.get("logging"))
    if logging_data:
        logging_config.verbose = _as_bool(logging_data.get("verbose")) or False
        logging_config.log_file = _resolve_path(root, _as_str(logging_data.get("log_file")))

    return MadeIndexConfig(
        root=root,
        namespace=namespace,
        repo_path=repo_path,
        index_dir=index_dir,
        cache_dir=cache_dir,
        max_index_age_hours=max_age,
        sources=sources,
        service=service,
        logging=logging_config,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _resolve_path(root: Path, value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return path


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
