"""
Configuration Loader

Loads application settings from config/settings.yaml, then applies overrides
from the environment (a .env file in the working directory is loaded first).
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .constants import DEFAULT_CACHE_TTL

SETTINGS_FILE = 'settings.yaml'

# Environment variable -> (settings key, parser)
ENV_OVERRIDES = {
    'DATABASE_URL': ('database_url', str),
    'JWT_SECRET': ('jwt_secret', str),
    'JWT_EXPIRE_MINUTES': ('jwt_expire_minutes', int),
    'CORS_ORIGINS': ('cors_origins', lambda v: [o.strip() for o in v.split(',') if o.strip()]),
    'PUBLIC_DOMAIN': ('public_domain', str),
    'LISTING_CACHE_TTL': ('listing_cache_ttl', float),
    'SHOPIFY_API_VERSION': ('shopify_api_version', str),
    'AUTO_MIGRATE': ('auto_migrate', lambda v: v.strip().lower() in ('1', 'true', 'yes')),
    'LOG_VERBOSE': ('log_verbose', lambda v: v.strip().lower() in ('1', 'true', 'yes')),
}


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""
    database_url: str = "sqlite:///vendorhub.db"
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    public_domain: str = "http://localhost:8000"
    listing_cache_ttl: float = DEFAULT_CACHE_TTL
    shopify_api_version: str = "2024-10"
    auto_migrate: bool = True
    log_verbose: bool = False

    def with_overrides(self, **overrides: Any) -> "Settings":
        return replace(self, **overrides)


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'settings.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Collect settings overrides from environment variables.

    Args:
        environ: Mapping to read (default: os.environ)

    Returns:
        Dictionary of settings keys to parsed values
    """
    environ = os.environ if environ is None else environ
    overrides = {}
    for env_name, (key, parse) in ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is None or raw == '':
            continue
        try:
            overrides[key] = parse(raw)
        except ValueError as e:
            raise ValueError(f"Invalid value for {env_name}: {raw!r}") from e
    return overrides


def load_settings(
    filename: str = SETTINGS_FILE,
    environ: Optional[Dict[str, str]] = None,
    use_dotenv: bool = True,
) -> Settings:
    """
    Load settings: YAML defaults, then environment overrides.

    Args:
        filename: YAML file inside the config directory
        environ: Environment mapping (default: os.environ)
        use_dotenv: Load a .env file into os.environ first

    Returns:
        Settings instance
    """
    if use_dotenv and environ is None:
        load_dotenv()

    try:
        values = load_config(filename).get('settings', {})
    except FileNotFoundError:
        values = {}

    known = set(Settings.__dataclass_fields__)
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown settings in {filename}: {', '.join(sorted(unknown))}")

    values.update(env_overrides(environ))
    return Settings(**values)
