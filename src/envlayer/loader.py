"""Load env files into a target store.

This is the I/O side of envlayer: it resolves path specifications, reads and
decodes the files, and hands the parsed sources to the merge engine. All
precedence decisions live in :mod:`envlayer.merge`.

Usage:
    from envlayer import load_env

    result = load_env()                                  # ./.env into os.environ
    result = load_env([".env.local", ".env"])            # first file wins
    result = load_env("~/.env", override=True)
    result = load_env(".env", target=my_settings_dict)   # leave os.environ alone

    if result.error:
        ...
"""

import codecs
import logging
import os
import random
from pathlib import Path
from typing import Dict, List, MutableMapping, Optional, Sequence, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

from dotenv import find_dotenv

from envlayer.config import LoaderSettings
from envlayer.exceptions import (
    EnvLayerError,
    InvalidOptionError,
    SourceReadError,
    TargetWriteError,
)
from envlayer.logger import Logger, create_logger
from envlayer.merge import LoadResult, MergeOptions, apply, merge_sources
from envlayer.parser import parse

PathItem = Union[str, "os.PathLike[str]"]
PathSpec = Union[PathItem, Sequence[PathItem]]

DEFAULT_ENV_FILE = ".env"

TIPS = [
    "specify a custom env file with path='/custom/path/.env'",
    "load multiple env files with path=['.env.local', '.env']",
    "enable debug logging with debug=True",
    "override existing env vars with override=True",
    "suppress all logs with quiet=True",
    "write to a custom mapping with target=my_dict",
    "preset options with ENVLAYER_CONFIG_PATH, ENVLAYER_CONFIG_OVERRIDE, ...",
    "keep secrets out of git with `envlayer gitignore`",
]


def random_tip() -> str:
    return random.choice(TIPS)


def resolve_paths(path: Optional[PathSpec] = None) -> List[Path]:
    """Turn a path specification into an ordered list of file paths.

    Accepts None (``./.env``), a string, an ``os.PathLike``, a ``file://``
    URL, a ``~``-relative path, or a list/tuple of those.

    Raises:
        InvalidOptionError: For any other type
    """
    if path is None:
        return [Path.cwd() / DEFAULT_ENV_FILE]
    if isinstance(path, (str, os.PathLike)):
        items: List[PathItem] = [path]
    elif isinstance(path, (list, tuple)):
        items = list(path)
    else:
        raise InvalidOptionError(
            "path must be a string, path-like object, or a list of them",
            details={"type": type(path).__name__},
        )
    return [_resolve_one(item) for item in items]


def _resolve_one(item: PathItem) -> Path:
    if isinstance(item, os.PathLike):
        item = os.fspath(item)
    if not isinstance(item, str):
        raise InvalidOptionError(
            "path entries must be strings or path-like objects",
            details={"type": type(item).__name__},
        )
    if item.startswith("file://"):
        item = url2pathname(urlparse(item).path)
    return Path(item).expanduser()


def _check_encoding(encoding: str) -> None:
    try:
        codecs.lookup(encoding)
    except LookupError as exc:
        raise InvalidOptionError(
            f"Unknown encoding {encoding!r}",
            details={"encoding": encoding},
        ) from exc


def read_source(path: Path, encoding: str = "utf-8") -> str:
    """Read one env file.

    Raises:
        SourceReadError: If the file is missing, unreadable or not decodable
    """
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(
            f"Cannot read {path}: {exc}",
            details={"path": str(path), "encoding": encoding},
        ) from exc


def _short_paths(paths: Sequence[Path]) -> str:
    shown = []
    for p in paths:
        try:
            shown.append(os.path.relpath(p))
        except ValueError:
            # Different drive on Windows
            shown.append(str(p))
    return ",".join(shown)


def env_values(path: Optional[PathSpec] = None, encoding: str = "utf-8") -> Dict[str, str]:
    """Parse and merge env files without touching any store.

    Raises:
        SourceReadError: If a file cannot be read
    """
    _check_encoding(encoding)
    sources = [parse(read_source(p, encoding)) for p in resolve_paths(path)]
    return merge_sources(sources)


def find_env_file(filename: str = DEFAULT_ENV_FILE) -> Optional[Path]:
    """Search the working directory and its parents for ``filename``."""
    found = find_dotenv(filename, usecwd=True)
    return Path(found) if found else None


_default_loggers: Dict[bool, Logger] = {}


def default_logger(debug: bool = False) -> Logger:
    """Logger used by :func:`load_env` when the caller passes none.

    Created once per debug flag and reused, so repeated loads do not
    reconfigure the "envlayer" logging handlers.
    """
    if debug not in _default_loggers:
        _default_loggers[debug] = create_logger(
            "envlayer", level=logging.DEBUG if debug else None
        )
    return _default_loggers[debug]


def reset_default_loggers() -> None:
    """Drop cached default loggers (useful for testing)."""
    _default_loggers.clear()


def load_env(
    path: Optional[PathSpec] = None,
    *,
    encoding: Optional[str] = None,
    target: Optional[MutableMapping[str, str]] = None,
    override: Optional[bool] = None,
    debug: Optional[bool] = None,
    quiet: Optional[bool] = None,
    logger: Optional[Logger] = None,
) -> LoadResult:
    """Load env files into ``target`` (default: ``os.environ``).

    Options left as None fall back to ``LoaderSettings.from_env()``.
    Loading is all-or-nothing: if any file cannot be read, or the target
    rejects a value, the target is left untouched and the error is returned
    in ``LoadResult.error``.

    Args:
        path: File(s) to load, highest precedence first
        encoding: Text encoding of the files
        target: Store receiving the values
        override: Overwrite values already present in ``target``
        debug: Log skipped keys and read failures
        quiet: Suppress informational output
        logger: Logger to report through (default: :func:`default_logger`)

    Raises:
        InvalidOptionError: If ``path`` or ``encoding`` is invalid
    """
    settings = LoaderSettings.from_env()

    if path is None:
        path = settings.paths
    encoding = encoding or settings.encoding
    options = MergeOptions(
        override=settings.override if override is None else override,
        quiet=settings.quiet if quiet is None else quiet,
        debug=settings.debug if debug is None else debug,
    )
    if target is None:
        target = os.environ
    if logger is None:
        logger = default_logger(options.debug)

    _check_encoding(encoding)
    paths = resolve_paths(path)

    sources: List[Dict[str, str]] = []
    error: Optional[SourceReadError] = None
    for env_path in paths:
        try:
            sources.append(parse(read_source(env_path, encoding)))
        except SourceReadError as exc:
            if options.debug:
                logger.debug(f"Failed to load {env_path} {exc.message}", path=str(env_path))
            error = exc
            break

    result = apply(sources, target, options, error=error, logger=logger)

    if isinstance(result.error, TargetWriteError) and options.debug:
        key = result.error.details["key"]
        logger.debug(f"Failed to write {key} {result.error.details['error']}", key=key)
    if isinstance(result.error, EnvLayerError):
        if not options.quiet:
            logger.warning(
                f"failed to load env from {_short_paths(paths)}: {result.error.message}"
            )
        return result

    if options.debug or not options.quiet:
        logger.info(
            f"injecting env ({len(result.injected)}) from {_short_paths(paths)} "
            f"-- tip: {random_tip()}"
        )
    return result


__all__ = [
    "TIPS",
    "random_tip",
    "resolve_paths",
    "read_source",
    "env_values",
    "find_env_file",
    "load_env",
    "default_logger",
    "reset_default_loggers",
]
