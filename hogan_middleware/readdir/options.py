"""Scan options for the directory reader."""

from dataclasses import dataclass, fields
from typing import Union

from ..errors import InvalidArgument

# Bitwise options, kept for callers that combine flags with |
ABSOLUTE_PATHS = 1
CASELESS_SORT = 2
CASE_SORT = 4
INCLUDE_DIRECTORIES = 8
INCLUDE_HIDDEN = 16
NON_RECURSIVE = 32
IGNORE_ERRORS = 64

_FLAG_FIELDS = {
    'absolute_paths': ABSOLUTE_PATHS,
    'caseless_sort': CASELESS_SORT,
    'case_sort': CASE_SORT,
    'include_directories': INCLUDE_DIRECTORIES,
    'include_hidden': INCLUDE_HIDDEN,
    'non_recursive': NON_RECURSIVE,
    'ignore_errors': IGNORE_ERRORS,
}

ALL_FLAGS = sum(_FLAG_FIELDS.values())


@dataclass(frozen=True)
class ScanOptions:
    """Behaviour switches for a single scan.

    Attributes:
        absolute_paths: Prefix results with the absolute path of the root
        caseless_sort: Sort results ignoring case
        case_sort: Sort results case sensitively, applied after caseless_sort
        include_directories: Report directories (with a trailing slash) as well as files
        include_hidden: Descend into directories whose name starts with a dot
        non_recursive: Only list the root directory itself
        ignore_errors: Drop entries that fail to list or stat (non-blocking scans only)
    """
    absolute_paths: bool = False
    caseless_sort: bool = False
    case_sort: bool = False
    include_directories: bool = False
    include_hidden: bool = False
    non_recursive: bool = False
    ignore_errors: bool = False

    @classmethod
    def from_flags(cls, flags: int) -> 'ScanOptions':
        """Build options from a bitwise combination of the module flags.

        Raises:
            InvalidArgument: If flags is not an int or carries an unknown bit
        """
        if isinstance(flags, bool) or not isinstance(flags, int):
            raise InvalidArgument(f"options must be set as a number, got {type(flags).__name__}")
        if flags < 0 or flags & ~ALL_FLAGS:
            raise InvalidArgument(f"Unknown option bits in {flags:#x}")
        return cls(**{name: bool(flags & bit) for name, bit in _FLAG_FIELDS.items()})

    def to_flags(self) -> int:
        """Return the bitwise form of these options."""
        return sum(bit for name, bit in _FLAG_FIELDS.items() if getattr(self, name))

    @classmethod
    def coerce(cls, options: Union['ScanOptions', int, None]) -> 'ScanOptions':
        """Accept None, a ScanOptions or an int mask and return a ScanOptions."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.from_flags(options)

    def __str__(self):
        enabled = [f.name for f in fields(self) if getattr(self, f.name)]
        return ','.join(enabled) or 'none'
