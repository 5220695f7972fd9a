"""
Configuration for the application.
"""

from .settings import Settings, DEFAULT_TEXT_MODEL, DEFAULT_IMAGE_MODEL

__all__ = ['Settings', 'DEFAULT_TEXT_MODEL', 'DEFAULT_IMAGE_MODEL']
