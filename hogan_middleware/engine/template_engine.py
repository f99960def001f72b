#!/usr/bin/env python3

import asyncio
import logging
import os
import threading
from typing import Any, Dict, List, Mapping, Optional, Tuple

import aiofiles
import pystache
import xxhash
from pystache.parsed import ParsedTemplate

from ..errors import TemplateNotFound
from ..readdir import ABSOLUTE_PATHS, CASE_SORT, INCLUDE_DIRECTORIES, scan_async, scan_sync
from .watcher import TemplateWatcher

logger = logging.getLogger(__name__)


def template_name(template_path: str) -> str:
    """Name a template by its file name without the extension."""
    return os.path.splitext(os.path.basename(template_path))[0]


class _Template:
    """A parsed template together with the source it came from."""

    __slots__ = ('path', 'source', 'checksum', 'parsed')

    def __init__(self, path: str, source: str, checksum: str, parsed: ParsedTemplate):
        self.path = path
        self.source = source
        self.checksum = checksum
        self.parsed = parsed


class TemplateEngine:
    """Caches the mustache templates of a views directory and renders them.

    Templates are found by scanning the views directory for files with the
    template extension, at any depth. Every template can be used as a partial
    by any other using its name, e.g. ``{{> header}}`` for ``header.mustache``.
    When watching is enabled each directory of the views tree is watched and
    the whole cache is rebuilt after a change.
    """

    def __init__(self, views_path: str, extension: str = '.mustache', watch: bool = True,
                 debounce_ms: int = 250):
        """Initialize engine.

        Args:
            views_path: Directory holding the templates
            extension: File extension of template files, including the dot
            watch: Rebuild the cache when the views directory changes
            debounce_ms: Quiet period after a change before rebuilding
        """
        self.views_path = views_path
        self.extension = extension if extension.startswith('.') else '.' + extension
        self.watch = watch
        self._templates: Optional[Dict[str, _Template]] = None
        self._refresh_lock = threading.Lock()
        self._watcher = TemplateWatcher(self.refresh_templates, debounce_ms) if watch else None

    @property
    def loaded(self) -> bool:
        return self._templates is not None

    @property
    def watched_paths(self) -> List[str]:
        return self._watcher.paths if self._watcher else []

    def _filters(self) -> List[str]:
        return ['**' + self.extension]

    def _build(self, sources: List[Tuple[str, str]]) -> Dict[str, _Template]:
        """Parse template sources, reusing parsed templates whose checksum is unchanged."""
        previous = self._templates or {}
        templates = {}
        for path, source in sources:
            name = template_name(path)
            checksum = xxhash.xxh64(source.encode('utf-8')).hexdigest()

            if name in templates:
                logger.warning(f"Template {name} at {path} replaces {templates[name].path}")

            cached = previous.get(name)
            if cached is not None and cached.path == path and cached.checksum == checksum:
                templates[name] = cached
                logger.debug(f"Template unchanged: {name}")
                continue

            templates[name] = _Template(path, source, checksum, pystache.parse(source))
            logger.info(f"Stored template {name}")
        return templates

    def _read_sources(self) -> List[Tuple[str, str]]:
        sources = []
        for path in scan_sync(self.views_path, self._filters(), ABSOLUTE_PATHS | CASE_SORT):
            with open(path, 'r', encoding='utf-8') as f:
                sources.append((path, f.read()))
        return sources

    def refresh_watches(self):
        """Replace all directory watches with one per directory of the views tree."""
        if self._watcher is None:
            return
        logger.info("Refreshing watched directories")
        self._watcher.clear()
        self._watcher.watch(os.path.abspath(self.views_path))
        for path in scan_sync(self.views_path, ['**/'], ABSOLUTE_PATHS | INCLUDE_DIRECTORIES):
            self._watcher.watch(path)

    def refresh_templates(self):
        """Re-read every template in the views directory, blocking.

        Safe to call at any time, it is also the handler for changes seen by
        the directory watches.
        """
        with self._refresh_lock:
            logger.info(f"Refreshing templates for {self.views_path}")
            self.refresh_watches()
            self._templates = self._build(self._read_sources())
            logger.info("Refreshing templates complete")

    async def load_async(self):
        """Read every template without blocking the event loop.

        Directory watches are set up and templates parsed in a worker thread.
        Does nothing when templates are already loaded.
        """
        if self._templates is not None:
            return

        paths = await scan_async(self.views_path, self._filters(), ABSOLUTE_PATHS | CASE_SORT)
        sources = []
        for path in paths:
            async with aiofiles.open(path, 'r', encoding='utf-8') as f:
                sources.append((path, await f.read()))

        def install():
            with self._refresh_lock:
                if self._templates is None:
                    self.refresh_watches()
                    self._templates = self._build(sources)

        await asyncio.to_thread(install)
        logger.info(f"Loaded {len(self._templates)} templates from {self.views_path}")

    def get_templates(self) -> Dict[str, ParsedTemplate]:
        """Get all parsed templates by name, reading them on first use."""
        if self._templates is None:
            self.refresh_templates()
        return {name: template.parsed for name, template in self._templates.items()}

    def render(self, template_path: str, data: Optional[Mapping[str, Any]] = None) -> str:
        """Render a template with the supplied data.

        Templates not loaded yet are read first, blocking. Inside an event loop
        call :meth:`load_async` beforehand, as :func:`setup` does on start-up.

        Args:
            template_path: Template name or path, only the base name counts
            data: Values made available to the template

        Returns:
            Rendered output

        Raises:
            TemplateNotFound: If no template has that name
        """
        if self._templates is None:
            self.refresh_templates()
        templates = self._templates

        name = template_name(template_path)
        if name not in templates:
            raise TemplateNotFound(name)

        partials = {key: template.source for key, template in templates.items()}
        renderer = pystache.Renderer(partials=partials)
        return renderer.render(templates[name].parsed, data or {})

    def close(self):
        """Stop watching the views directory."""
        if self._watcher is not None:
            self._watcher.stop()
