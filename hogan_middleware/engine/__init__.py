"""Mustache view rendering for aiohttp applications."""

from .middleware import get_engine, render_string, render_template, setup, template
from .template_engine import TemplateEngine
from .watcher import TemplateWatcher

__all__ = ['TemplateEngine', 'TemplateWatcher', 'setup', 'get_engine', 'render_string',
           'render_template', 'template']
