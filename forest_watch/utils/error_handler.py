import functools
import logging
import traceback
from typing import Dict, Any, Callable, TypeVar, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

T = TypeVar('T')

class AppError(Exception):
    """Base application error class."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ConfigError(AppError):
    """Required configuration (e.g. the Gemini API key) is missing."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)

class RequestError(AppError):
    """The caller supplied an unusable request."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)

class NetworkError(AppError):
    """Calling the hosted model (or the proxy) failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=502, details=details)

class ParseError(AppError):
    """The model response did not contain parseable JSON."""

    def __init__(self, message: str = "The AI returned an invalid data format. Please try your search again.",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=502, details=details)

class SchemaError(AppError):
    """Parsed JSON lacks required fields or carries an invalid status."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=502, details=details)

class GenerationError(AppError):
    """The model answered, but without the content we asked for."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=502, details=details)

def handle_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator for handling errors in API endpoints.

    Args:
        func: The function to decorate

    Returns:
        Decorated function that handles errors
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except AppError as e:
            logger.error(f"Application error: {e.message}, status_code: {e.status_code}, details: {e.details}")
            raise HTTPException(status_code=e.status_code, detail={"message": e.message, "details": e.details})
        except HTTPException:
            # Re-raise HTTPException as is
            raise
        except Exception as e:
            logger.exception(f"Unhandled error in {func.__name__}: {str(e)}")
            raise HTTPException(status_code=500, detail={"message": "Internal Server Error", "details": str(e)})

    return wrapper

def format_error_response(message: str) -> Dict[str, Any]:
    """
    Format the error body returned by the proxy relay.

    Args:
        message: The human-readable error message

    Returns:
        Formatted error response
    """
    return {"error": message}

def log_exception(e: Exception, context: str = "") -> None:
    """
    Log an exception with context and stack trace.

    Args:
        e: The exception to log
        context: Additional context
    """
    if context:
        logger.error(f"Error in {context}: {str(e)}")
    else:
        logger.error(f"Error: {str(e)}")

    logger.error(traceback.format_exc())
