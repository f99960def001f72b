#!/usr/bin/env python3

import functools
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

from aiohttp import web

from ..errors import TemplateNotFound
from .template_engine import TemplateEngine

logger = logging.getLogger(__name__)

ENGINE_KEY = web.AppKey('hogan_engine', TemplateEngine)


def setup(app: web.Application, views_path: str, **engine_kwargs) -> TemplateEngine:
    """Install a template engine for the views directory on an application.

    Templates are loaded when the application starts and the directory
    watches are removed on cleanup.

    Args:
        app: Application to install the engine on
        views_path: Directory holding the templates
        **engine_kwargs: Passed to :class:`TemplateEngine`

    Returns:
        The installed engine
    """
    engine = TemplateEngine(views_path, **engine_kwargs)
    app[ENGINE_KEY] = engine

    async def _load(app: web.Application):
        await engine.load_async()

    async def _close(app: web.Application):
        engine.close()

    app.on_startup.append(_load)
    app.on_cleanup.append(_close)
    return engine


def get_engine(app: web.Application) -> TemplateEngine:
    """Get the engine installed by :func:`setup`."""
    try:
        return app[ENGINE_KEY]
    except KeyError:
        raise RuntimeError("Template engine is not set up for this application") from None


def render_string(template_name: str, request: web.Request,
                  context: Optional[Mapping[str, Any]] = None) -> str:
    """Render a view of the request's application to a string."""
    engine = get_engine(request.app)
    return engine.render(template_name, context)


def render_template(template_name: str, request: web.Request,
                    context: Optional[Mapping[str, Any]] = None, *,
                    status: int = 200) -> web.Response:
    """Render a view into an HTML response.

    Raises:
        web.HTTPInternalServerError: If the template does not exist
    """
    try:
        text = render_string(template_name, request, context)
    except TemplateNotFound as e:
        logger.error(f"Error rendering {request.path}: {e}")
        raise web.HTTPInternalServerError(text=str(e))
    return web.Response(text=text, status=status, content_type='text/html')


def template(template_name: str, *, status: int = 200):
    """Decorate a handler so the mapping it returns is rendered with a view.

    Handlers may still return a response object, which is passed through.
    """
    def wrapper(handler: Callable[..., Awaitable[Any]]):
        @functools.wraps(handler)
        async def wrapped(request: web.Request, *args, **kwargs):
            context = await handler(request, *args, **kwargs)
            if isinstance(context, web.StreamResponse):
                return context
            return render_template(template_name, request, context, status=status)
        return wrapped
    return wrapper
