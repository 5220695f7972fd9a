"""
API routers for the application.
"""

from .analysis_router import router as analysis_router
from .proxy_router import router as proxy_router
from .health_router import router as health_router

__all__ = [
    'analysis_router',
    'proxy_router',
    'health_router'
]
