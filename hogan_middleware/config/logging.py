import os
import logging
import logging.handlers
from typing import Dict, Any


def configure_logging(config: Dict[str, Any]):
    """Configure logging with an optional rotating file handler and a console handler."""
    log_config = config.get('logging', {})
    log_level = getattr(logging, str(log_config.get('level', 'INFO')).upper())
    log_file = log_config.get('file')
    if isinstance(log_file, dict):
        log_file = log_file.get('path')
    max_size_mb = log_config.get('max_size_mb', 10)
    backup_count = log_config.get('backup_count', 5)
    console_enabled = log_config.get('console', True)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers
    root_logger.handlers = []

    # File handler
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count
        )
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # Console handler
    if console_enabled:
        console_handler = logging.StreamHandler()
        console_formatter = logging.Formatter(
            log_config.get('format', '%(levelname)s - %(message)s')
        )
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    # Watchdog logs every inotify event at debug level
    logging.getLogger('watchdog').setLevel(max(log_level, logging.INFO))

    return root_logger
