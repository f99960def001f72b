#!/usr/bin/env python3

import sys
import logging
import signal
import argparse
import asyncio
import os
from typing import Dict, Any

from aiohttp import web

from .config.config import load_config
from .config.logging import configure_logging
from .engine import render_template, setup

# Initialize basic logging
logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
shutdown_requested = False


def signal_handler(signum, frame):
    """Handle interrupt signals for graceful shutdown."""
    global shutdown_requested
    logger.info(f"Received signal {signum}, initiating graceful shutdown...")
    shutdown_requested = True


def make_view(template_name: str, data: Dict[str, Any]):
    """Build a handler rendering a fixed template with fixed data."""
    async def view(request: web.Request) -> web.Response:
        return render_template(template_name, request, dict(data))
    return view


def build_app(config: Dict[str, Any]) -> web.Application:
    """Create the application described by the configuration.

    Args:
        config: Configuration dictionary, see :func:`load_config`

    Returns:
        Application with the template engine, static files and routes installed
    """
    app = web.Application()
    templates_config = config.get('templates', {})
    setup(
        app,
        config['views'],
        extension=templates_config.get('extension', '.mustache'),
        watch=templates_config.get('watch', True),
        debounce_ms=templates_config.get('debounce_ms', 250),
    )

    routes = config.get('routes') or {}
    for path, route in routes.items():
        if isinstance(route, str):
            route = {'template': route}
        app.router.add_get(path, make_view(route['template'], route.get('data') or {}))
        logger.info(f"Route {path} -> {route['template']}")

    static_path = config.get('static')
    if static_path and os.path.isdir(static_path):
        # Registered after the routes, which win over files of the same path
        static_url = config.get('static_url') or '/'
        app.router.add_static(static_url, static_path)
        logger.info(f"Serving static files from {static_path} at {static_url}")
    elif static_path:
        logger.warning(f"Static directory does not exist: {static_path}")

    return app


async def main() -> int:
    """Main entry point for the view server."""
    parser = argparse.ArgumentParser(
        description='Serve mustache views and static files',
        prog='hogan-serve',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve using config file settings
  %(prog)s --config config/hogan-config.yaml

  # Serve another views directory on port 8080
  %(prog)s --views ./views --port 8080
""")

    parser.add_argument('--config', type=str, default=None,
                        help='Path to configuration file (default: search standard locations)')

    group = parser.add_argument_group('server options')
    group.add_argument('--views', type=str, metavar='DIR',
                       help='Directory holding the templates. Overrides config setting')
    group.add_argument('--static', type=str, metavar='DIR',
                       help='Directory of static files. Overrides config setting')
    group.add_argument('--host', type=str, help='Address to listen on. Overrides config setting')
    group.add_argument('--port', type=int, help='Port to listen on. Overrides config setting')
    group.add_argument('--no-watch', action='store_true',
                       help='Do not reload templates when the views directory changes')
    args = parser.parse_args()

    try:
        # Load configuration
        config = load_config(args.config)

        # Command line overrides
        if args.views:
            config['views'] = args.views
        if args.static:
            config['static'] = args.static
        if args.host:
            config['server']['host'] = args.host
        if args.port is not None:
            config['server']['port'] = args.port
        if args.no_watch:
            config['templates']['watch'] = False

        # Configure logging
        configure_logging(config)

        # Register signal handlers
        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        if not os.path.isdir(config['views']):
            logger.error(f"Views directory does not exist: {config['views']}")
            return 1

        app = build_app(config)
        runner = web.AppRunner(app)
        await runner.setup()
        try:
            host = config['server']['host']
            port = config['server']['port']
            site = web.TCPSite(runner, host, port)
            await site.start()
            logger.info(f"Listening on http://{host}:{port}")

            while not shutdown_requested:
                await asyncio.sleep(0.5)
        finally:
            await runner.cleanup()

        logger.info("Server stopped")
        return 0

    except Exception as e:
        logger.error(f"Error in main: {e}", exc_info=True)
        return 1


def run():
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
