import logging
from fastapi import APIRouter, Request
from typing import Dict, Any

from forest_watch.api.dependencies import get_deforestation_service
from forest_watch.models.schemas import (
    AnalyzeRequest, VisualEvidenceRequest, DeepResearchRequest, DeepResearchResult
)
from forest_watch.utils.error_handler import handle_error

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

@router.post("/analyze")
@handle_error
async def analyze_forest(body: AnalyzeRequest, request: Request) -> Dict[str, Any]:
    """
    Analyze deforestation for a named forest.

    Args:
        body: The forest to analyze

    Returns:
        The analysis result in camelCase JSON
    """
    service = get_deforestation_service(request)
    result = await service.analyze(body.forest_name)
    return result.to_wire()

@router.post("/visual-evidence")
@handle_error
async def visual_evidence(body: VisualEvidenceRequest, request: Request) -> Dict[str, Any]:
    """
    Generate a before/after satellite-style image for an earlier analysis.

    Returns:
        imageUrl (a JPEG data URL), imagePrompt, lossPercentage and severity
    """
    service = get_deforestation_service(request)
    evidence = await service.generate_visual(body.analysis_data, body.start_year, body.end_year)
    return evidence.to_wire()

@router.post("/deep-research")
@handle_error
async def deep_research(body: DeepResearchRequest, request: Request) -> Dict[str, Any]:
    """Run the deep research narrative for an earlier analysis."""
    service = get_deforestation_service(request)
    text = await service.deep_research(body.analysis_data)
    return DeepResearchResult(text=text).to_wire()
