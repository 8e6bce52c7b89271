"""Dataclass settings for the envlayer loader.

Every loader option can be preset through environment variables so that a
deployment can change how env files are loaded without code changes.
Explicit arguments passed to ``load_env`` always win over these settings.
"""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

_TRUE_VALUES = {"true", "1", "yes", "on"}

DEFAULT_PREFIX = "ENVLAYER_CONFIG"


def parse_bool(value: Optional[str], default: bool = False) -> bool:
    """Interpret an environment string as a boolean."""
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class LoaderSettings:
    """Loader configuration

    Attributes:
        paths: Env files to load, highest precedence first (None: ./.env)
        encoding: Text encoding used to decode the files
        override: Overwrite values already present in the target store
        debug: Log skipped keys and read failures
        quiet: Suppress the "injecting env" message
    """

    paths: Optional[List[str]] = None
    encoding: str = "utf-8"
    override: bool = False
    debug: bool = False
    quiet: bool = False

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_PREFIX,
        env: Optional[Mapping[str, str]] = None,
    ) -> "LoaderSettings":
        """Load loader settings from environment variables

        Args:
            prefix: Environment variable prefix
            env: Mapping to read from (defaults to os.environ)

        Environment variables:
            {prefix}_PATH: Env file path, or a comma-separated list of paths
            {prefix}_ENCODING: File encoding (default: utf-8)
            {prefix}_OVERRIDE: "true" to overwrite existing values
            {prefix}_DEBUG: "true" for debug output
            {prefix}_QUIET: "true" to suppress informational output
        """
        source = os.environ if env is None else env

        raw_path = source.get(f"{prefix}_PATH", "")
        paths = [p.strip() for p in raw_path.split(",") if p.strip()] or None

        return cls(
            paths=paths,
            encoding=source.get(f"{prefix}_ENCODING") or "utf-8",
            override=parse_bool(source.get(f"{prefix}_OVERRIDE")),
            debug=parse_bool(source.get(f"{prefix}_DEBUG")),
            quiet=parse_bool(source.get(f"{prefix}_QUIET")),
        )
