"""Tests for envlayer.merge precedence and override rules."""

import io
import logging
import os
from collections.abc import MutableMapping

import pytest

from envlayer.exceptions import TargetWriteError
from envlayer.logger import DefaultLogger
from envlayer.merge import LoadResult, MergeOptions, apply, merge_sources, populate
from envlayer.parser import parse

LOCAL = {"BASIC": "local_basic", "LOCAL": "local"}
SHARED = {"BASIC": "basic", "SINGLE_QUOTES": "single_quotes"}


class RecordingStore(MutableMapping):
    """Mapping that remembers every write."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})
        self.writes = []

    def __getitem__(self, key):
        return self._data[key]

    def __setitem__(self, key, value):
        self.writes.append((key, value))
        self._data[key] = value

    def __delitem__(self, key):
        del self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)


class NulRejectingStore(RecordingStore):
    """Rejects values with a NUL character, as os.environ does."""

    def __setitem__(self, key, value):
        if "\x00" in value:
            raise ValueError("embedded null byte")
        super().__setitem__(key, value)


class TestMergeSources:
    def test_first_source_wins(self):
        assert merge_sources([LOCAL, SHARED]) == {
            "BASIC": "local_basic",
            "LOCAL": "local",
            "SINGLE_QUOTES": "single_quotes",
        }

    def test_order_matters(self):
        assert merge_sources([SHARED, LOCAL])["BASIC"] == "basic"

    def test_no_sources(self):
        assert merge_sources([]) == {}

    def test_inputs_are_not_mutated(self):
        first = dict(LOCAL)
        merge_sources([first, SHARED])
        assert first == LOCAL


class TestPopulate:
    def test_writes_missing_keys(self):
        target = {}
        written = populate(target, {"A": "1"})
        assert target == {"A": "1"}
        assert written == {"A": "1"}

    def test_keeps_existing_value(self):
        target = {"A": "existing"}
        written = populate(target, {"A": "1"})
        assert target == {"A": "existing"}
        assert written == {}

    def test_empty_existing_value_counts_as_unset(self):
        target = {"A": ""}
        populate(target, {"A": "1"})
        assert target == {"A": "1"}

    def test_override(self):
        target = {"A": "existing"}
        written = populate(target, {"A": "1"}, override=True)
        assert target == {"A": "1"}
        assert written == {"A": "1"}

    def test_debug_logs_skipped_keys(self):
        output = io.StringIO()
        logger = DefaultLogger(output=output, level=logging.DEBUG)
        populate({"A": "existing"}, {"A": "1"}, debug=True, logger=logger)
        assert '"A" is already defined and was NOT overwritten' in output.getvalue()

    def test_no_debug_output_by_default(self):
        output = io.StringIO()
        logger = DefaultLogger(output=output, level=logging.DEBUG)
        populate({"A": "existing"}, {"A": "1"}, logger=logger)
        assert output.getvalue() == ""


class TestApply:
    def test_precedence_across_sources(self):
        target = {}
        result = apply([LOCAL, SHARED], target, MergeOptions())

        expected = {"BASIC": "local_basic", "LOCAL": "local", "SINGLE_QUOTES": "single_quotes"}
        assert result.parsed == expected
        assert target == expected
        assert result.error is None
        assert result.ok

    def test_existing_value_is_protected(self):
        target = {"BASIC": "existing"}
        result = apply([{"BASIC": "basic"}], target, MergeOptions(override=False))

        assert target["BASIC"] == "existing"
        assert result.parsed["BASIC"] == "basic"
        assert result.injected == {}

    def test_empty_existing_value_is_replaced(self):
        target = {"BASIC": ""}
        apply([{"BASIC": "basic"}], target, MergeOptions(override=False))
        assert target["BASIC"] == "basic"

    def test_override_forces_write(self):
        target = {"BASIC": "existing"}
        result = apply([{"BASIC": "basic"}], target, MergeOptions(override=True))
        assert target["BASIC"] == "basic"
        assert result.injected == {"BASIC": "basic"}

    def test_override_replaces_empty_value(self):
        target = {"BASIC": ""}
        apply([{"BASIC": "basic"}], target, MergeOptions(override=True))
        assert target["BASIC"] == "basic"

    def test_default_options(self):
        target = {"BASIC": "existing"}
        apply([{"BASIC": "basic"}], target)
        assert target["BASIC"] == "existing"

    def test_is_idempotent_without_override(self):
        source = parse("BASIC=basic\nOTHER=other # comment\n")
        target = {"OTHER": "kept"}

        apply([source], target, MergeOptions())
        first = dict(target)
        apply([source], target, MergeOptions())

        assert target == first == {"BASIC": "basic", "OTHER": "kept"}

    def test_any_mutable_mapping_is_a_target(self):
        store = RecordingStore({"BASIC": "existing"})
        apply([LOCAL], store)

        assert store.writes == [("LOCAL", "local")]
        assert dict(store) == {"BASIC": "existing", "LOCAL": "local"}

    def test_upstream_error_short_circuits(self):
        target = {"BASIC": "existing"}
        error = FileNotFoundError("missing .env")

        result = apply([{"BASIC": "basic", "NEW": "new"}], target, MergeOptions(override=True), error=error)

        assert result.error is error
        assert result.parsed is None
        assert not result.ok
        assert target == {"BASIC": "existing"}


class TestRollback:
    """A rejected write leaves the target as it was before the call."""

    def test_earlier_writes_are_removed(self):
        store = NulRejectingStore({"KEEP": "me"})

        with pytest.raises(TargetWriteError) as exc_info:
            populate(store, {"FIRST": "1", "BAD": "a\x00b", "LAST": "3"})

        assert dict(store) == {"KEEP": "me"}
        assert exc_info.value.code == "TARGET_WRITE_FAILED"
        assert exc_info.value.details["key"] == "BAD"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_overwritten_values_are_restored(self):
        store = NulRejectingStore({"FIRST": "old", "EMPTY": ""})

        with pytest.raises(TargetWriteError):
            populate(store, {"FIRST": "new", "EMPTY": "filled", "BAD": "\x00"}, override=True)

        assert dict(store) == {"FIRST": "old", "EMPTY": ""}

    def test_apply_returns_the_error(self):
        store = NulRejectingStore({"BASIC": "existing"})

        result = apply([{"NEW": "new"}, {"BAD": "x\x00y"}], store)

        assert isinstance(result.error, TargetWriteError)
        assert result.parsed is None
        assert result.injected == {}
        assert not result.ok
        assert dict(store) == {"BASIC": "existing"}

    def test_process_environment(self, monkeypatch: pytest.MonkeyPatch):
        for key in ("ENVLAYER_ROLLBACK_FIRST", "ENVLAYER_ROLLBACK_BAD"):
            monkeypatch.delenv(key, raising=False)

        parsed = parse("ENVLAYER_ROLLBACK_FIRST=1\nENVLAYER_ROLLBACK_BAD=a\x00b\n")
        result = apply([parsed], os.environ)

        assert isinstance(result.error, TargetWriteError)
        assert "ENVLAYER_ROLLBACK_FIRST" not in os.environ
        assert "ENVLAYER_ROLLBACK_BAD" not in os.environ


class TestLoadResult:
    def test_defaults(self):
        result = LoadResult()
        assert result.parsed is None
        assert result.error is None
        assert result.injected == {}
        assert result.ok

    @pytest.mark.parametrize("error", [OSError("x"), ValueError("y")])
    def test_not_ok_with_error(self, error):
        assert not LoadResult(error=error).ok
