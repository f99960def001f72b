"""Recursive directory reader with glob filters."""

from .filters import apply_filters, compile_filter
from .options import (
    ABSOLUTE_PATHS,
    CASELESS_SORT,
    CASE_SORT,
    IGNORE_ERRORS,
    INCLUDE_DIRECTORIES,
    INCLUDE_HIDDEN,
    NON_RECURSIVE,
    ScanOptions,
)
from .reader import is_dir, scan, scan_async, scan_sync

__all__ = [
    'scan_sync', 'scan_async', 'scan', 'is_dir', 'compile_filter', 'apply_filters', 'ScanOptions',
    'ABSOLUTE_PATHS', 'CASELESS_SORT', 'CASE_SORT', 'INCLUDE_DIRECTORIES', 'INCLUDE_HIDDEN',
    'NON_RECURSIVE', 'IGNORE_ERRORS',
]
