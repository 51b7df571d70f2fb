"""
Configuration Loader

Loads the app configuration from a YAML file in the config directory,
overridden by environment variables (a .env file is honoured).
"""

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from ..context import ApiVersion, Context

# Context field -> environment variable
ENV_OVERRIDES = {
    'api_key': 'FPP_API_KEY',
    'api_secret_key': 'FPP_API_SECRET_KEY',
    'scopes': 'FPP_SCOPES',
    'host_name': 'FPP_HOST_NAME',
    'api_version': 'FPP_API_VERSION',
    'is_embedded_app': 'FPP_IS_EMBEDDED_APP',
    'is_private_app': 'FPP_IS_PRIVATE_APP',
    'user_agent_prefix': 'FPP_USER_AGENT_PREFIX',
    'log_file': 'FPP_LOG_FILE',
}

_BOOL_FIELDS = {'is_embedded_app', 'is_private_app'}


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
        filename: Name of the config file (e.g., 'app.yaml'), or an absolute path

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = Path(filename)
    if not config_path.is_absolute():
        config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def load_context(filename: str = 'app.yaml', session_storage=None) -> Context:
    """
    Build a Context from the YAML `app:` section and FPP_* environment variables.

    Environment variables win over the file.

    Args:
        filename: Config file name or absolute path
        session_storage: Storage backend (in-memory when omitted)

    Returns:
        Configured Context

    Example config:
        app:
          api_key: abc123
          api_secret_key: shhh
          scopes: [read_products, write_products]
          host_name: my-app.example.com
          api_version: "2022-04"
          is_embedded_app: true
    """
    load_dotenv()
    app_config = load_config(filename).get('app') or {}
    settings: Dict[str, Any] = {
        key: value for key, value in app_config.items() if key in ENV_OVERRIDES
    }

    for field_name, env_var in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value is not None:
            settings[field_name] = value

    for field_name in _BOOL_FIELDS:
        if field_name in settings:
            settings[field_name] = _parse_bool(settings[field_name])

    if 'api_version' in settings:
        settings['api_version'] = ApiVersion(str(settings['api_version']))

    kwargs: Dict[str, Any] = {
        'api_key': settings.pop('api_key', ''),
        'api_secret_key': settings.pop('api_secret_key', ''),
        'scopes': settings.pop('scopes', []),
        'host_name': settings.pop('host_name', ''),
    }
    kwargs.update(settings)
    if session_storage is not None:
        kwargs['session_storage'] = session_storage

    return Context(**kwargs)

