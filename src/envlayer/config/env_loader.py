"""Non-mutating environment view with optional .env support.

Builds a mapping in deterministic order without touching os.environ:
1) .env file (if provided and exists)
2) OS environment variables
3) Explicit overrides (highest precedence)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from envlayer.exceptions import SourceReadError
from envlayer.parser import parse


class EnvLoader:
    """Load environment-style key/value pairs with .env support."""

    def __init__(self, env_file: Optional[Path | str] = None, encoding: str = "utf-8") -> None:
        self.env_file = Path(env_file).expanduser() if env_file else None
        self.encoding = encoding

    def load(self, overrides: Optional[Mapping[str, str]] = None) -> MutableMapping[str, str]:
        """Load environment data with deterministic precedence.

        Precedence (low -> high): .env file, OS env vars, overrides

        Raises:
            SourceReadError: If the env file exists but cannot be read
        """
        data: MutableMapping[str, str] = {}

        env_path = self.env_file or Path.cwd() / ".env"
        if env_path.exists():
            try:
                text = env_path.read_text(encoding=self.encoding)
            except (OSError, UnicodeDecodeError) as exc:
                raise SourceReadError(
                    f"Cannot read {env_path}: {exc}",
                    details={"path": str(env_path)},
                ) from exc
            data.update(parse(text))

        data.update(os.environ)

        if overrides:
            data.update({k: str(v) for k, v in overrides.items()})

        return data


__all__ = ["EnvLoader"]
