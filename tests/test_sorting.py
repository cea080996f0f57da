"""Tests for stable multi-key sorting."""

from datetime import datetime

import pytest

from remotetreelib._common.sorting import SORT_KEYS, register_sort_key, sort_entries
from remotetreelib.aio import Entry


@pytest.fixture
def entries():
    return [
        Entry("1", "b.txt", size=10, version=1, mod_time=datetime(2015, 3, 1)),
        Entry("2", "a", is_dir=True, size=0, version=4, mod_time=datetime(2015, 1, 1)),
        Entry("3", "c.txt", size=10, version=2, mod_time=datetime(2015, 2, 1)),
        Entry("4", "a.txt", size=5, version=2, mod_time=None),
    ]


def ids(entries):
    return [e.id for e in entries]


def test_no_keys_keeps_remote_order(entries):
    assert ids(sort_entries(entries)) == ["1", "2", "3", "4"]


def test_sort_by_name(entries):
    assert ids(sort_entries(entries, "name")) == ["2", "4", "1", "3"]


def test_reverse_suffix(entries):
    assert ids(sort_entries(entries, "name_r")) == ["3", "1", "4", "2"]


def test_later_keys_break_ties(entries):
    # size ties between 1 and 3 are broken by version descending
    assert ids(sort_entries(entries, "size", "version_r")) == ["2", "4", "3", "1"]


def test_sort_is_stable_for_equal_keys(entries):
    # 1 and 3 share size 10 and keep their remote order
    assert ids(sort_entries(entries, "size")) == ["2", "4", "1", "3"]
    assert ids(sort_entries(entries, "size_r")) == ["1", "3", "4", "2"]


def test_type_puts_directories_first(entries):
    assert ids(sort_entries(entries, "type")) == ["2", "1", "3", "4"]


def test_modtime_treats_missing_as_oldest(entries):
    assert ids(sort_entries(entries, "modtime")) == ["4", "2", "3", "1"]


def test_unknown_keys_are_ignored(entries):
    assert ids(sort_entries(entries, "colour", "name", "bogus_r")) == ["2", "4", "1", "3"]


def test_input_is_not_mutated(entries):
    before = ids(entries)
    sort_entries(entries, "name")
    assert ids(entries) == before


def test_register_sort_key(entries):
    register_sort_key("idnum", lambda e: -int(e.id))
    try:
        assert ids(sort_entries(entries, "idnum")) == ["4", "3", "2", "1"]
    finally:
        SORT_KEYS.pop("idnum")

    with pytest.raises(ValueError):
        register_sort_key("size_r", lambda e: e.size)
