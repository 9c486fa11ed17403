"""
Centralized Logging Configuration
=================================

Unified logging setup for the application: colored console output,
an optional rotating log file, a request-id filter and quieter
third-party loggers.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from colorama import Fore, Style, init

init(autoreset=True)

APP_LOGGER_NAME = "ComponentStudio"


class RequestIdFilter(logging.Filter):
    """Attach ``g.request_id`` to records emitted inside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        from flask import g, has_request_context

        if has_request_context() and not hasattr(record, 'request_id'):
            record.request_id = getattr(g, 'request_id', None)  # type: ignore[attr-defined]
        return True


class WerkzeugEndpointFilter(logging.Filter):
    """Suppress werkzeug access lines for high-frequency endpoints."""

    _suppressed_endpoints = (
        'GET /health ',
        'GET /api/health ',
        'GET /favicon',
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return not any(endpoint in message for endpoint in self._suppressed_endpoints)


class ColoredSmartFormatter(logging.Formatter):
    """Formatter with per-level and per-area color coding."""

    def __init__(self, include_function: bool = False, use_colors: bool = True):
        self.include_function = include_function
        self.use_colors = use_colors
        super().__init__()

        self.level_colors = {
            logging.DEBUG: Fore.CYAN,
            logging.INFO: Fore.GREEN,
            logging.WARNING: Fore.YELLOW,
            logging.ERROR: Fore.RED,
            logging.CRITICAL: Fore.RED + Style.BRIGHT,
        }

        self.service_colors = {
            'factory': Fore.BLUE,
            'generation': Fore.MAGENTA,
            'openrouter': Fore.MAGENTA,
            'auth': Fore.YELLOW,
            'session': Fore.CYAN,
            'route': Fore.GREEN,
        }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, '%H:%M:%S')
        level = record.levelname
        name = self._clean_logger_name(record.name)
        message = record.getMessage()
        request_id = getattr(record, 'request_id', None)
        if request_id:
            message = f"[{request_id[:8]}] {message}"

        if self.use_colors:
            level_color = self.level_colors.get(record.levelno, "")
            service_color = self._get_service_color(name)
            colored_level = f"{level_color}{level:8}{Style.RESET_ALL}"
            colored_name = f"{service_color}{name:20}{Style.RESET_ALL}"
        else:
            colored_level = f"{level:8}"
            colored_name = f"{name:20}"

        line = f"[{timestamp}] {colored_level} {colored_name}"
        if self.include_function and record.levelno >= logging.WARNING:
            location = f"{record.funcName}:{record.lineno}"
            if self.use_colors:
                location = f"{Fore.WHITE}{Style.DIM}[{location}]{Style.RESET_ALL}"
            else:
                location = f"[{location}]"
            line = f"{line} {location}"
        line = f"{line} {message}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line

    def _clean_logger_name(self, name: str) -> str:
        """Shorten logger names for readability."""
        replacements = {
            f'{APP_LOGGER_NAME}.': '',
            'component_studio.services.': 'svc.',
            'component_studio.routes.': 'route.',
            'component_studio.utils.': 'util.',
            'component_studio.': '',
        }
        for old, new in replacements.items():
            if name.startswith(old):
                name = new + name[len(old):]
                break

        if len(name) > 20:
            name = name[:17] + "..."
        return name

    def _get_service_color(self, service_name: str) -> str:
        name_lower = service_name.lower()
        for service, color in self.service_colors.items():
            if service in name_lower:
                return color
        return Fore.WHITE


class LoggingConfig:
    """Centralized logging configuration for the application."""

    def __init__(self, log_level: Optional[str] = None, log_dir: Optional[str] = None,
                 is_development: bool = False):
        self.log_level = self._get_log_level(log_level)
        self.log_dir = Path(log_dir) if log_dir else None
        self.is_development = is_development

    def setup_logging(self) -> logging.Logger:
        """Install console (and optionally file) handlers on the root logger.

        Only handlers previously attached by this class are replaced, so
        repeated app creation (tests) and pytest's caplog handler coexist.
        """
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            if getattr(handler, "_component_studio", False):
                root_logger.removeHandler(handler)
        root_logger.setLevel(self.log_level)

        req_filter = RequestIdFilter()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(ColoredSmartFormatter(include_function=self.is_development))
        console_handler.addFilter(req_filter)
        console_handler._component_studio = True  # type: ignore[attr-defined]
        root_logger.addHandler(console_handler)

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                self.log_dir / "app.log",
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding='utf-8',
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(ColoredSmartFormatter(include_function=True, use_colors=False))
            file_handler.addFilter(req_filter)
            file_handler._component_studio = True  # type: ignore[attr-defined]
            root_logger.addHandler(file_handler)

        self._configure_specific_loggers()

        app_logger = logging.getLogger(APP_LOGGER_NAME)
        app_logger.debug(f"Logging configured - Level: {logging.getLevelName(self.log_level)}")
        return app_logger

    def _get_log_level(self, level: Optional[str]) -> int:
        level_str = (level or os.environ.get('LOG_LEVEL', 'INFO')).upper()
        return getattr(logging, level_str, logging.INFO)

    def _configure_specific_loggers(self):
        """Lower the verbosity of chatty third-party loggers."""
        if not self.is_development:
            logging.getLogger('werkzeug').setLevel(logging.WARNING)

        logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
        logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)
        logging.getLogger('aiohttp.access').setLevel(logging.WARNING)
        logging.getLogger('asyncio').setLevel(logging.WARNING)

        werkzeug_logger = logging.getLogger('werkzeug')
        if not any(isinstance(f, WerkzeugEndpointFilter) for f in werkzeug_logger.filters):
            werkzeug_logger.addFilter(WerkzeugEndpointFilter())


def setup_application_logging(app) -> logging.Logger:
    """Configure logging from the Flask app config - call once per app."""
    config = LoggingConfig(
        log_level=app.config.get('LOG_LEVEL'),
        log_dir=app.config.get('LOG_DIR'),
        is_development=app.config.get('APP_ENV') == 'development',
    )
    return config.setup_logging()


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the application namespace."""
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
