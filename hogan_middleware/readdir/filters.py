"""Glob-style include filters for directory listings."""

import re
from typing import List, Optional, Pattern, Sequence

_WILDCARD = re.compile(r'\*\*|\*')


def _translate(match) -> str:
    return '.*' if match.group(0) == '**' else '[^/]*'


def compile_filter(pattern: str) -> Pattern:
    """Compile a filter string into a case-insensitive, end-anchored regex.

    ``*`` matches anything within one path segment and ``**`` matches across
    segments. Only the dot is treated as a literal, so a filter behaves as an
    "ends with" test against the candidate path.

    Args:
        pattern: Filter string, e.g. ``**.mustache`` or ``views/*.txt``

    Returns:
        Compiled regular expression, use with ``search``
    """
    source = _WILDCARD.sub(_translate, pattern.replace('.', '\\.'))
    return re.compile(source + '$', re.IGNORECASE)


def apply_filters(paths: Sequence[str], filters: Optional[Sequence[str]]) -> List[str]:
    """Keep the paths matching at least one filter, grouped in filter order.

    Paths matched by an earlier filter come before paths only matched by a
    later one; within a group the original order is kept. No path appears twice.

    Args:
        paths: Candidate paths
        filters: Filter strings, or None to keep everything

    Returns:
        Filtered list of paths
    """
    if filters is None:
        return list(paths)

    result = []
    seen = set()
    for pattern in filters:
        regex = compile_filter(pattern)
        for path in paths:
            if path not in seen and regex.search(path):
                seen.add(path)
                result.append(path)
    return result
