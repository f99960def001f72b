"""Mustache view middleware for aiohttp, backed by a recursive directory reader."""

from .engine import TemplateEngine, render_template, setup, template
from .errors import HoganError, InvalidArgument, TemplateNotFound

__version__ = '0.1.0'

__all__ = ['TemplateEngine', 'setup', 'render_template', 'template', 'HoganError',
           'InvalidArgument', 'TemplateNotFound']
