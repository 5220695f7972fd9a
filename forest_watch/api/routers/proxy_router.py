import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from forest_watch.api.dependencies import get_deforestation_service
from forest_watch.models.schemas import DeepResearchRequest, ProxyRequest, VisualEvidenceRequest
from forest_watch.services.deforestation_service import DeforestationService
from forest_watch.utils.error_handler import AppError, RequestError, format_error_response, log_exception

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

# Older client builds send the original action names
ACTION_ALIASES = {
    "fetchDeforestationData": "analyze",
    "generateVisualEvidence": "generateVisual",
    "fetchDeepResearchData": "deepResearch",
}

async def dispatch_action(service: DeforestationService, action: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run one proxy action and return its JSON-ready result.

    Args:
        service: The deforestation service
        action: analyze, generateVisual or deepResearch (or an alias)
        payload: Action arguments

    Returns:
        The result body

    Raises:
        RequestError: If the action is unknown or the payload incomplete
        AppError: Whatever the service raises
    """
    action = ACTION_ALIASES.get(action, action)

    if action == "analyze":
        if not payload.get("forestName"):
            raise RequestError("Missing forestName")
        result = await service.analyze(payload["forestName"])
        return result.to_wire()

    if action == "generateVisual":
        if not payload.get("analysisData"):
            raise RequestError("Missing payload for image generation")
        request = _validate(VisualEvidenceRequest, payload, "image generation")
        evidence = await service.generate_visual(request.analysis_data, request.start_year, request.end_year)
        return evidence.to_wire()

    if action == "deepResearch":
        if not payload.get("analysisData"):
            raise RequestError("Missing payload for deep research")
        request = _validate(DeepResearchRequest, payload, "deep research")
        text = await service.deep_research(request.analysis_data)
        return {"text": text}

    raise RequestError(f"Unknown action: {action}")

def _validate(model, payload: Dict[str, Any], purpose: str):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise RequestError(f"Invalid payload for {purpose}",
                           details={"errors": e.errors(include_url=False, include_input=False, include_context=False)})

@router.api_route("/gemini-proxy", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def gemini_proxy(request: Request) -> JSONResponse:
    """
    Relay an action to Gemini so the API key stays on the server.

    Body: {"action": "analyze" | "generateVisual" | "deepResearch", "payload": {...}}

    Returns:
        200 with the result, 500 with {"error": ...} on failure, 405 for non-POST
    """
    if request.method != "POST":
        return JSONResponse(status_code=405, content=format_error_response("Method Not Allowed"))

    try:
        raw = await request.body()
        body = ProxyRequest.model_validate(json.loads(raw or b"{}"))
        service = get_deforestation_service(request)
        result = await dispatch_action(service, body.action or "", body.payload)
        return JSONResponse(status_code=200, content=result)
    except AppError as e:
        logger.error(f"Error in proxy relay: {e.message}")
        return JSONResponse(status_code=500, content=format_error_response(e.message))
    except (ValueError, ValidationError) as e:
        logger.error(f"Malformed proxy request: {e}")
        return JSONResponse(status_code=500, content=format_error_response("Malformed request body."))
    except Exception as e:
        log_exception(e, "proxy relay")
        return JSONResponse(status_code=500, content=format_error_response("An internal server error occurred."))
