#!/usr/bin/env python3

import pytest
from hogan_middleware.errors import InvalidArgument
from hogan_middleware.readdir import (
    ABSOLUTE_PATHS, CASELESS_SORT, CASE_SORT, IGNORE_ERRORS, INCLUDE_DIRECTORIES,
    INCLUDE_HIDDEN, NON_RECURSIVE, ScanOptions,
)


def test_flags_are_distinct_bits():
    flags = [ABSOLUTE_PATHS, CASELESS_SORT, CASE_SORT, INCLUDE_DIRECTORIES,
             INCLUDE_HIDDEN, NON_RECURSIVE, IGNORE_ERRORS]
    assert len(set(flags)) == len(flags)
    for flag in flags:
        assert flag & (flag - 1) == 0


def test_from_flags():
    options = ScanOptions.from_flags(ABSOLUTE_PATHS | INCLUDE_DIRECTORIES)
    assert options == ScanOptions(absolute_paths=True, include_directories=True)


def test_both_sort_flags_are_kept():
    options = ScanOptions.from_flags(CASELESS_SORT | CASE_SORT)
    assert options.caseless_sort and options.case_sort


def test_to_flags_round_trip():
    assert ScanOptions(non_recursive=True, ignore_errors=True).to_flags() == NON_RECURSIVE | IGNORE_ERRORS
    assert ScanOptions().to_flags() == 0


@pytest.mark.parametrize('flags', [128, -1, 1 | 256])
def test_unknown_bits_rejected(flags):
    with pytest.raises(InvalidArgument):
        ScanOptions.from_flags(flags)


@pytest.mark.parametrize('value', ['1', 1.0, True])
def test_non_integer_flags_rejected(value):
    with pytest.raises(InvalidArgument):
        ScanOptions.coerce(value)


def test_coerce():
    options = ScanOptions(case_sort=True)
    assert ScanOptions.coerce(options) is options
    assert ScanOptions.coerce(None) == ScanOptions()
    assert ScanOptions.coerce(CASE_SORT) == options


def test_str_lists_enabled_options():
    assert str(ScanOptions()) == 'none'
    assert str(ScanOptions(absolute_paths=True, include_hidden=True)) == 'absolute_paths,include_hidden'
