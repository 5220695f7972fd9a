"""
Service layer for business logic.
"""

from .genai_service import GenAIService, TextReply
from .deforestation_service import DeforestationService, create_deforestation_service
from .proxy_client import ProxyClient

__all__ = [
    'GenAIService', 'TextReply',
    'DeforestationService', 'create_deforestation_service',
    'ProxyClient'
]
