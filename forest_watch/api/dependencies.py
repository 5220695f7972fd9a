from fastapi import Request

from forest_watch.services.deforestation_service import DeforestationService
from forest_watch.utils.error_handler import ConfigError

def get_deforestation_service(request: Request) -> DeforestationService:
    """
    Return the service created at startup.

    Raises:
        ConfigError: If the service was never initialized
    """
    service = getattr(request.app.state, "deforestation_service", None)
    if service is None:
        raise ConfigError("GenAI service is not initialized.")
    return service
