"""Configuration for envlayer.

Example:
    from envlayer.config import LoaderSettings, EnvLoader

    # Loader defaults from ENVLAYER_CONFIG_* variables
    settings = LoaderSettings.from_env()

    # Read-only view: .env < os.environ < overrides
    data = EnvLoader(".env").load({"DEBUG": "1"})
"""

from envlayer.config.env_loader import EnvLoader
from envlayer.config.settings import DEFAULT_PREFIX, LoaderSettings, parse_bool

__all__ = [
    "LoaderSettings",
    "EnvLoader",
    "DEFAULT_PREFIX",
    "parse_bool",
]
