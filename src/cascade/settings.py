"""
Configuration loading for the cascade service.

Static structure (providers, tasks, app defaults) lives in a YAML file.
Secrets and deployment values come from the environment and are referenced
from the YAML as ``${VAR}`` or ``${VAR:-default}``.
"""

from __future__ import annotations
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "config.yaml"

REQUIRED_ENV_KEYS = (
    "FIREWORKS_API_KEY",
    "GOOGLE_API_KEY",
    "FIREWORKS_BASE_URL",
    "GOOGLE_BASE_URL",
)

MODEL_ENV_KEYS = {
    "deepseek": "DEEPSEEK_MODEL",
    "qwen": "QWEN_MODEL",
    "gemini": "GEMINI_MODEL",
}

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


class ConfigurationError(ValueError):
    """Required configuration is missing or unusable."""


def validate_api_keys(environ: Optional[Mapping[str, str]] = None) -> None:
    """Fail fast, naming every missing key, before any upstream call is made."""
    env = os.environ if environ is None else environ
    missing = [key for key in REQUIRED_ENV_KEYS if not env.get(key)]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")


def resolve_env(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """Recursively substitute ``${VAR}`` / ``${VAR:-default}`` references."""
    env = os.environ if environ is None else environ
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: env.get(m.group(1)) or (m.group(2) or ""), value)
    if isinstance(value, dict):
        return {k: resolve_env(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve_env(v, env) for v in value]
    return value


def config_path_from_env() -> Path:
    return Path(os.getenv("CASCADE_CONFIG", str(DEFAULT_CONFIG_PATH)))


def load_config(config_path: Union[Path, str]) -> Dict[str, Any]:
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")
    with open(config_path) as f:
        config = yaml.safe_load(f) or {}

    if 'providers' not in config:
        raise ValueError("Config missing 'providers'")
    if 'tasks' not in config:
        raise ValueError("Config missing 'tasks'")

    for task_name, task_cfg in config['tasks'].items():
        if 'provider' not in task_cfg:
            raise ValueError(f"Task '{task_name}' missing provider")
        if 'model' not in task_cfg:
            raise ValueError(f"Task '{task_name}' missing model")
        if task_cfg['provider'] not in config['providers']:
            raise ValueError(f"Task '{task_name}' references unknown provider '{task_cfg['provider']}'")

    return config


def _normalize_origin(url: str) -> str:
    url = url.strip().rstrip("/")
    if url and url != "*" and "://" not in url:
        url = f"https://{url}"
    return url


@dataclass
class AppSettings:
    environment: str = "production"
    version: str = "1.0.0"
    allowed_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    rate_limit_max_requests: int = 10
    rate_limit_window_seconds: float = 60.0

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_config(cls, config: Dict[str, Any], environ: Optional[Mapping[str, str]] = None) -> "AppSettings":
        app_cfg = resolve_env(config.get("app") or {}, environ)
        rate_cfg = app_cfg.get("rate_limit") or {}

        origins = [_normalize_origin(o) for o in app_cfg.get("allowed_origins") or []]
        public_url = _normalize_origin(app_cfg.get("public_url") or "")
        if public_url:
            origins.append(public_url)

        return cls(
            environment=app_cfg.get("environment") or "production",
            version=str(app_cfg.get("version", "1.0.0")),
            allowed_origins=[o for o in dict.fromkeys(origins) if o],
            rate_limit_max_requests=int(rate_cfg.get("max_requests", 10)),
            rate_limit_window_seconds=float(rate_cfg.get("window_seconds", 60)),
        )
