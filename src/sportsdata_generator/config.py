"""Configuration for the Sportsdata API client generator."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import LOG_LEVELS


logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = PACKAGE_DIR / "config.default.json"
DEFAULT_ENDPOINTS_PATH = PACKAGE_DIR / "endpoints.json"

SUPPORTED_VERSIONS = ("v2", "v3")


class ConfigError(Exception):
    pass


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    service_name: str = Field(default="sportsdata-generator")

    generator_log_level: str = Field(default="INFO")

    generator_http_timeout_seconds: float = Field(default=30)
    generator_http_verify_ssl: bool = Field(default=True)

    generator_command: str = Field(default="jane-openapi")
    generator_namespace_prefix: str = Field(default="Sportsdata\\API")
    generator_temp_directory: str = Field(default="temp")

    generator_config_path: Optional[str] = Field(default=None)
    generator_endpoints_path: Optional[str] = Field(default=None)

    @field_validator("generator_log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid environment settings: {exc}") from exc


class EndpointRoutes(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    routes_v2: Dict[str, str] = Field(default_factory=dict, alias="routes-v2")
    routes_v3: Dict[str, str] = Field(default_factory=dict, alias="routes-v3")

    def table(self, version: str) -> Dict[str, str]:
        if version == "v2":
            return self.routes_v2
        if version == "v3":
            return self.routes_v3
        raise ConfigError(f"Unsupported API version: {version}")

    def route_names(self) -> List[str]:
        return [*self.routes_v3, *self.routes_v2]


class RunConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    versions: List[str] = Field(default_factory=lambda: list(SUPPORTED_VERSIONS))
    endpoints: List[str] = Field(default_factory=list)
    routes: List[str] = Field(default_factory=list)
    output_directory: str = Field(default="generated", alias="output-directory")


def _read_json(path: Path) -> Any:
    if not path.is_file():
        raise ConfigError(f"Configuration file not found under: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not read configuration file {path}: {exc}") from exc


def load_registry(path: Optional[Path] = None) -> Dict[str, EndpointRoutes]:
    """Load the endpoint/route registry, keeping the file's endpoint order."""
    registry_path = Path(path) if path else DEFAULT_ENDPOINTS_PATH
    raw = _read_json(registry_path)
    if not isinstance(raw, dict):
        raise ConfigError(f"Endpoint registry must be a JSON object: {registry_path}")

    registry: Dict[str, EndpointRoutes] = {}
    for name, routes in raw.items():
        try:
            registry[name] = EndpointRoutes.model_validate(routes)
        except ValidationError as exc:
            raise ConfigError(f"Invalid routes for endpoint {name}: {exc}") from exc
    logger.debug("Loaded %s endpoints from %s", len(registry), registry_path)
    return registry


def default_routes(registry: Dict[str, EndpointRoutes]) -> List[str]:
    names: Dict[str, None] = {}
    for routes in registry.values():
        for name in routes.route_names():
            names.setdefault(name, None)
    return list(names)


def load_run_config(
    registry: Dict[str, EndpointRoutes], path: Optional[Path] = None
) -> RunConfig:
    """Load the run configuration and fill unset options from the registry.

    ``versions`` defaults to both supported versions, ``endpoints`` to every
    registry endpoint and ``routes`` to the union of all registered route names.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    raw = _read_json(config_path)
    if not isinstance(raw, dict):
        raise ConfigError(f"Run configuration must be a JSON object: {config_path}")

    defaults: Dict[str, Any] = {
        "versions": list(SUPPORTED_VERSIONS),
        "endpoints": list(registry),
        "routes": default_routes(registry),
    }
    try:
        config = RunConfig.model_validate({**defaults, **raw})
    except ValidationError as exc:
        raise ConfigError(f"Invalid run configuration {config_path}: {exc}") from exc

    unknown_versions = [v for v in config.versions if v not in SUPPORTED_VERSIONS]
    if unknown_versions:
        raise ConfigError(f"Unsupported API versions: {', '.join(unknown_versions)}")
    unknown_endpoints = [e for e in config.endpoints if e not in registry]
    if unknown_endpoints:
        raise ConfigError(f"Unknown endpoints: {', '.join(unknown_endpoints)}")
    return config
