import logging
from fastapi import APIRouter, Request
from typing import Dict, Any

from forest_watch import __version__
from forest_watch.config.settings import DEFAULT_TEXT_MODEL

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

def get_genai_status(request: Request) -> Dict[str, Any]:
    """
    Get the status of the GenAI service held on the app.

    Returns:
        Dictionary with status information
    """
    service = getattr(request.app.state, "deforestation_service", None)
    if service is None:
        return {
            "initialized": False,
            "error": "GenAI service is not initialized.",
            "model": None,
            "image_model": None,
        }
    return service.genai.get_status()

@router.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    """
    Health check endpoint that reports on the status of services.

    Returns:
        JSON with status information
    """
    genai_status = get_genai_status(request)

    status = "ok"
    diagnostics = {
        "llm_initialized": genai_status["initialized"],
        "llm_error": genai_status["error"],
        "llm_model": genai_status["model"] or DEFAULT_TEXT_MODEL,
        "image_model": genai_status["image_model"],
        "version": __version__,
    }

    if not genai_status["initialized"]:
        status = "degraded"
        logger.warning(f"Health check status: {status}. Diagnostics: {diagnostics}")
    else:
        logger.info(f"Health check status: {status}")

    return {"status": status, "diagnostics": diagnostics}
