"""
API package for the application.
"""

from .routers import (
    analysis_router,
    proxy_router,
    health_router
)

__all__ = [
    'analysis_router',
    'proxy_router',
    'health_router'
]
