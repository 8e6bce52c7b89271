"""envlayer - load .env files into an environment-like store.

This package provides:
- parser: .env text -> flat str mapping
- merge: multi-source precedence and override rules
- loader: path resolution and file reading around the core
- gitignore: keep env files out of version control
- config: loader defaults from ENVLAYER_CONFIG_* variables
- logger: pluggable logging interface
- exceptions: structured error classes
"""

__version__ = "0.1.0"

from envlayer.exceptions import (
    EnvLayerError,
    GitignoreWriteError,
    InvalidOptionError,
    SourceReadError,
    TargetWriteError,
)

from envlayer.parser import format_env, parse

from envlayer.merge import LoadResult, MergeOptions, apply, merge_sources, populate

from envlayer.loader import env_values, find_env_file, load_env, resolve_paths

from envlayer.gitignore import ensure_gitignored

from envlayer.config import EnvLoader, LoaderSettings

from envlayer.logger import Logger, create_logger, get_logger

__all__ = [
    "__version__",
    # Core
    "parse",
    "format_env",
    "MergeOptions",
    "LoadResult",
    "merge_sources",
    "populate",
    "apply",
    # Loader
    "load_env",
    "env_values",
    "find_env_file",
    "resolve_paths",
    "ensure_gitignored",
    # Config
    "LoaderSettings",
    "EnvLoader",
    # Logger
    "Logger",
    "create_logger",
    "get_logger",
    # Exceptions
    "EnvLayerError",
    "SourceReadError",
    "InvalidOptionError",
    "GitignoreWriteError",
    "TargetWriteError",
]
