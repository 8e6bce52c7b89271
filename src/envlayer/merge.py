"""Merge engine: combine parsed sources and write them into a target store.

Precedence rules:
1) Across sources, the first source that defines a key wins.
2) Against the target store, an existing non-empty value is kept unless
   ``override`` is set. An existing empty string counts as unset.

The target store is any ``MutableMapping[str, str]`` the caller owns
(``os.environ``, a plain dict, ...). Only its entries are touched.
Callers sharing one store across threads must serialize access themselves.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, MutableMapping, Optional, Sequence

from envlayer.exceptions import TargetWriteError
from envlayer.logger import Logger


@dataclass
class MergeOptions:
    """Options recognised by :func:`apply`.

    Attributes:
        override: Overwrite values already present in the target store
        quiet: Suppress informational output (used by the loader)
        debug: Log every key that was not written
    """

    override: bool = False
    quiet: bool = False
    debug: bool = False


@dataclass
class LoadResult:
    """Outcome of one load/apply call.

    Attributes:
        parsed: Effective values of all sources, or None on failure
        error: Upstream failure, passed through unchanged
        injected: Entries actually written into the target store
    """

    parsed: Optional[Dict[str, str]] = None
    error: Optional[BaseException] = None
    injected: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None


def merge_sources(sources: Sequence[Mapping[str, str]]) -> Dict[str, str]:
    """Union of ``sources``; on key collisions the earliest source wins."""
    merged: Dict[str, str] = {}
    for source in sources:
        for key, value in source.items():
            if key not in merged:
                merged[key] = value
    return merged


_MISSING = object()


def populate(
    target: MutableMapping[str, str],
    parsed: Mapping[str, str],
    override: bool = False,
    debug: bool = False,
    logger: Optional[Logger] = None,
) -> Dict[str, str]:
    """Write ``parsed`` into ``target`` following the override rule.

    Writes are all-or-nothing: when the store rejects a value, entries
    already written by this call are restored to their previous state.

    Returns:
        The entries that were written

    Raises:
        TargetWriteError: If the store rejected a write. The original
            exception is chained as ``__cause__``.
    """
    pending: Dict[str, str] = {}
    for key, value in parsed.items():
        if override or key not in target or target[key] == "":
            pending[key] = value
        elif debug and logger is not None:
            logger.debug(f'"{key}" is already defined and was NOT overwritten', key=key)

    previous: Dict[str, object] = {}
    for key, value in pending.items():
        previous[key] = target.get(key, _MISSING)
        try:
            target[key] = value
        except Exception as exc:
            _restore(target, previous)
            raise TargetWriteError(
                f"Target store rejected the value for {key!r}",
                details={"key": key, "error": str(exc), "rolled_back": len(previous) - 1},
            ) from exc
    return pending


def _restore(target: MutableMapping[str, str], previous: Mapping[str, object]) -> None:
    for key, old in previous.items():
        if old is _MISSING:
            target.pop(key, None)
        else:
            target[key] = old  # type: ignore[assignment]


def apply(
    sources: Sequence[Mapping[str, str]],
    target: MutableMapping[str, str],
    options: Optional[MergeOptions] = None,
    *,
    error: Optional[BaseException] = None,
    logger: Optional[Logger] = None,
) -> LoadResult:
    """Merge ``sources`` and write the result into ``target``.

    Args:
        sources: Parsed mappings in precedence order, highest first
        target: Store receiving the merged values
        options: Override/debug switches (defaults to MergeOptions())
        error: Failure reported while obtaining the sources. When given,
            nothing is written and the error is returned unchanged.
        logger: Receives debug output when ``options.debug`` is set

    Returns:
        LoadResult with the merged mapping, or with ``error`` set. A store
        that rejects a write yields a TargetWriteError and an unchanged
        target.
    """
    if error is not None:
        return LoadResult(parsed=None, error=error)

    options = options or MergeOptions()
    merged = merge_sources(sources)
    try:
        written = populate(
            target,
            merged,
            override=options.override,
            debug=options.debug,
            logger=logger,
        )
    except TargetWriteError as exc:
        return LoadResult(parsed=None, error=exc)
    return LoadResult(parsed=merged, injected=written)


__all__ = ["MergeOptions", "LoadResult", "merge_sources", "populate", "apply"]
