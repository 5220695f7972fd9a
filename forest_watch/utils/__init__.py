"""
Utility functions for the application.
"""

from .error_handler import (
    AppError,
    ConfigError,
    RequestError,
    NetworkError,
    ParseError,
    SchemaError,
    GenerationError,
    handle_error,
    format_error_response,
    log_exception
)

__all__ = [
    'AppError',
    'ConfigError',
    'RequestError',
    'NetworkError',
    'ParseError',
    'SchemaError',
    'GenerationError',
    'handle_error',
    'format_error_response',
    'log_exception'
]
