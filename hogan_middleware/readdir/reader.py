#!/usr/bin/env python3

import asyncio
import logging
import os
import stat
from typing import Any, Callable, List, Optional, Sequence, Union

import aiofiles.os

from ..errors import InvalidArgument
from .filters import apply_filters
from .options import ScanOptions

logger = logging.getLogger(__name__)

OptionsArg = Union[ScanOptions, int, None]


def is_dir(path: str) -> bool:
    """Check whether path is a directory, False when it can't be stat'd."""
    try:
        return stat.S_ISDIR(os.stat(path).st_mode)
    except (OSError, ValueError):
        return False


def _should_read_directory(name: str, options: ScanOptions) -> bool:
    """Check whether a sub-directory found during a scan should be descended into."""
    return not options.non_recursive and (not name.startswith('.') or options.include_hidden)


def _validate(root: Any, filters: Any, options: OptionsArg) -> ScanOptions:
    if not isinstance(root, (str, os.PathLike)):
        raise InvalidArgument(f"root must be a string, got {type(root).__name__}")
    if filters is not None:
        if isinstance(filters, str) or not isinstance(filters, (list, tuple)):
            raise InvalidArgument("filters must be None or a list of filter strings")
        if not all(isinstance(f, str) for f in filters):
            raise InvalidArgument("filters must only contain strings")
    return ScanOptions.coerce(options)


def _root_dir(root: Union[str, os.PathLike]) -> str:
    """Normalize root to end with exactly one separator."""
    return os.fspath(root).rstrip('/') + '/'


def _post_process(root: str, paths: List[str], filters: Optional[Sequence[str]],
                  options: ScanOptions) -> List[str]:
    """Apply filters, absolute prefixing and sorting to a raw listing."""
    paths = apply_filters(paths, filters)

    if options.absolute_paths:
        prefix = os.path.abspath(root).rstrip('/') + '/'
        paths = [prefix + path for path in paths]

    if options.caseless_sort:
        paths = sorted(paths, key=str.lower)

    if options.case_sort:
        paths = sorted(paths)

    return paths


def _read_dir_sync(directory: str, prefix_length: int, options: ScanOptions) -> List[str]:
    """List one directory depth first, returning root-relative paths."""
    result = []
    for name in os.listdir(directory):
        path = directory + name
        if is_dir(path):
            if options.include_directories:
                result.append(path[prefix_length:] + '/')
            if _should_read_directory(name, options):
                result.extend(_read_dir_sync(path + '/', prefix_length, options))
        else:
            result.append(path[prefix_length:])
    return result


def scan_sync(root: Union[str, os.PathLike], filters: Optional[Sequence[str]] = None,
              options: OptionsArg = None) -> List[str]:
    """Recursively list the files under root, blocking until done.

    A missing root gives an empty list. Any other error while listing
    propagates, ``ignore_errors`` only applies to the non-blocking scan.

    Args:
        root: Directory to scan
        filters: Optional filter strings, see :func:`compile_filter`
        options: ScanOptions or a bitwise combination of the option flags

    Returns:
        List of paths relative to root (or absolute with ``absolute_paths``)
    """
    options = _validate(root, filters, options)
    root_dir = _root_dir(root)
    if not os.path.exists(root_dir):
        logger.debug(f"Root path does not exist: {root_dir}")
        return []

    paths = _read_dir_sync(root_dir, len(root_dir), options)
    logger.debug(f"Read {len(paths)} entries from {root_dir} ({options})")
    return _post_process(os.fspath(root), paths, filters, options)


class _AsyncReader:
    """Concurrent traversal state for a single non-blocking scan."""

    def __init__(self, prefix_length: int, options: ScanOptions):
        self.prefix_length = prefix_length
        self.options = options

    def _failed(self, path: str, error: OSError) -> List[str]:
        if not self.options.ignore_errors:
            raise error
        logger.debug(f"Ignoring error reading {path}: {error}")
        return []

    async def read_dir(self, directory: str) -> List[str]:
        try:
            contents = await aiofiles.os.listdir(directory)
        except OSError as e:
            return self._failed(directory, e)

        tasks = [asyncio.ensure_future(self.read_entry(directory, name)) for name in contents]
        try:
            children = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        result = []
        for entries in children:
            result.extend(entries)
        return result

    async def read_entry(self, directory: str, name: str) -> List[str]:
        path = directory + name
        try:
            st = await aiofiles.os.stat(path)
        except OSError as e:
            return self._failed(path, e)

        if not stat.S_ISDIR(st.st_mode):
            return [path[self.prefix_length:]]

        # Directory entries are recorded before their subtree is read
        result = []
        if self.options.include_directories:
            result.append(path[self.prefix_length:] + '/')
        if _should_read_directory(name, self.options):
            result.extend(await self.read_dir(path + '/'))
        return result


async def scan_async(root: Union[str, os.PathLike], filters: Optional[Sequence[str]] = None,
                     options: OptionsArg = None) -> List[str]:
    """Recursively list the files under root without blocking the event loop.

    Each directory is listed once and its entries are stat'd concurrently,
    sub-directories are read concurrently as soon as they are found. Without
    ``ignore_errors`` the first failure cancels the outstanding reads and is
    raised; with it, the failing entry or subtree is left out.

    Sibling order in the result is only guaranteed when a sort option is set.

    Args:
        root: Directory to scan
        filters: Optional filter strings, see :func:`compile_filter`
        options: ScanOptions or a bitwise combination of the option flags

    Returns:
        List of paths relative to root (or absolute with ``absolute_paths``)
    """
    options = _validate(root, filters, options)
    root_dir = _root_dir(root)
    if not await aiofiles.os.path.exists(root_dir):
        logger.debug(f"Root path does not exist: {root_dir}")
        return []

    reader = _AsyncReader(len(root_dir), options)
    paths = await reader.read_dir(root_dir)
    logger.debug(f"Read {len(paths)} entries from {root_dir} ({options})")
    return _post_process(os.fspath(root), paths, filters, options)


def scan(root: Union[str, os.PathLike], on_done: Callable[[Optional[BaseException], List[str]], Any],
         filters: Optional[Sequence[str]] = None, options: OptionsArg = None) -> 'asyncio.Task':
    """Schedule a non-blocking scan and report through a completion handler.

    Must be called with a running event loop. ``on_done(error, paths)`` is
    called once, with ``(None, paths)`` on success or ``(error, [])`` when the
    scan fails or is cancelled (the error is then the ``CancelledError``). Scan
    errors are never raised from here and errors raised by ``on_done`` are
    logged.

    Raises:
        InvalidArgument: If on_done is not callable or the arguments are malformed
    """
    if not callable(on_done):
        raise InvalidArgument("on_done must be a function")
    _validate(root, filters, options)

    def _report(error, paths):
        try:
            on_done(error, paths)
        except Exception as e:
            logger.error(f"Error in scan completion handler: {e}", exc_info=True)

    async def _run():
        try:
            paths = await scan_async(root, filters, options)
        except Exception as e:
            _report(e, [])
        else:
            _report(None, paths)

    def _on_cancel(task):
        if task.cancelled():
            _report(asyncio.CancelledError(), [])

    task = asyncio.get_running_loop().create_task(_run())
    task.add_done_callback(_on_cancel)
    return task
