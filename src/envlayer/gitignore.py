"""Make sure env files stay out of version control."""

from pathlib import Path
from typing import Optional, Union

from envlayer.exceptions import GitignoreWriteError, SourceReadError
from envlayer.logger import Logger, get_logger


def ensure_gitignored(
    gitignore: Union[str, Path] = ".gitignore",
    entry: str = ".env",
    logger: Optional[Logger] = None,
) -> bool:
    """Append ``entry`` to ``gitignore`` unless a line already matches it.

    A missing .gitignore is created.

    Returns:
        True if the file was changed, False if the entry was already present

    Raises:
        SourceReadError: If an existing .gitignore cannot be read
        GitignoreWriteError: If the file cannot be written
    """
    logger = logger or get_logger("envlayer")
    path = Path(gitignore)

    try:
        current = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        current = ""
    except OSError as exc:
        logger.error(f"Failed to read {path}: {exc}")
        raise SourceReadError(f"Cannot read {path}: {exc}", details={"path": str(path)}) from exc

    if entry in (line.strip() for line in current.splitlines()):
        logger.info(f"{entry} already in {path}")
        return False

    prefix = "\n" if current and not current.endswith("\n") else ""
    try:
        with path.open("a", encoding="utf-8") as fh:
            fh.write(f"{prefix}{entry}\n")
    except OSError as exc:
        logger.error(f"Failed to write to {path}: {exc}")
        raise GitignoreWriteError(
            f"Cannot write {path}: {exc}",
            details={"path": str(path), "entry": entry},
        ) from exc

    logger.info(f"Added {entry} to {path}")
    return True


__all__ = ["ensure_gitignored"]
