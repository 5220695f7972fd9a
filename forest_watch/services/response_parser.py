import json
import logging
import re
from typing import Dict, Any, Iterable, List, Optional
from urllib.parse import urlparse

from pydantic import ValidationError

from forest_watch.models.schemas import AnalysisResult, DataSource, DeforestationStatus
from forest_watch.utils.error_handler import ParseError, SchemaError

logger = logging.getLogger(__name__)

LEADING_FENCE = re.compile(r"^```(?:json|JSON)?\s*")
TRAILING_FENCE = re.compile(r"\s*```$")
FENCED_BLOCK = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)

# Must be present and non-empty
REQUIRED_FIELDS = ("forestName", "status", "conclusion", "estimatedInitialArea")
# Must be present, may be empty strings
TEXT_FIELDS = ("summary", "areaLost", "timePeriod")
LIST_FIELDS = ("chartData", "deforestationDrivers")

def extract_json(text: str) -> Dict[str, Any]:
    """
    Locate and parse the JSON object inside a free-text model response.

    Fence markers at the very start and end are stripped, and the object is
    taken from the first '{' to the last '}', which tolerates prose around it.
    If that fails and a fenced block appears inside the prose, its body is
    tried instead.

    Args:
        text: Raw response text from the model

    Returns:
        The parsed JSON object

    Raises:
        ParseError: If no object can be located or parsed
    """
    stripped = (text or "").strip()
    candidates = [TRAILING_FENCE.sub("", LEADING_FENCE.sub("", stripped))]

    fenced = FENCED_BLOCK.search(stripped)
    if fenced:
        candidates.append(fenced.group(1).strip())

    error = None
    for candidate in candidates:
        try:
            return _parse_object(candidate)
        except ParseError as e:
            error = e

    logger.error(f"Invalid response format from AI ({error.details['reason']}): {text!r}")
    raise error

def _parse_object(candidate: str) -> Dict[str, Any]:
    start = candidate.find("{")
    end = candidate.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ParseError(details={"reason": "no JSON object found"})

    try:
        data = json.loads(candidate[start:end + 1])
    except json.JSONDecodeError as e:
        raise ParseError(details={"reason": str(e)})

    if not isinstance(data, dict):
        raise ParseError(details={"reason": "JSON value is not an object"})
    return data

def source_title(title: Optional[str], url: str) -> str:
    """Use the hostname when a citation has no title."""
    if title:
        return title
    return urlparse(url).hostname or url

def merge_sources(declared: Iterable[DataSource], grounding: Iterable[DataSource]) -> List[DataSource]:
    """
    Combine model-declared sources with grounding citations.

    Declared sources come first, each list keeps its own order, and for a
    url seen more than once the first occurrence wins.
    """
    unique: Dict[str, DataSource] = {}
    for source in [*declared, *grounding]:
        if source.url not in unique:
            unique[source.url] = source
    return list(unique.values())

def _declared_sources(raw: Any) -> List[DataSource]:
    if not isinstance(raw, list):
        return []

    sources = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("url"):
            logger.warning(f"Dropping declared source without url: {item!r}")
            continue
        url = str(item["url"])
        title = item.get("title")
        sources.append(DataSource(title=source_title(str(title) if title is not None else None, url), url=url))
    return sources

def validate_analysis(data: Dict[str, Any], grounding_sources: Iterable[DataSource] = ()) -> AnalysisResult:
    """
    Validate a parsed model payload and build the AnalysisResult.

    Args:
        data: JSON object returned by extract_json
        grounding_sources: Citations from the search-grounding metadata

    Returns:
        The validated, immutable AnalysisResult with merged sources

    Raises:
        SchemaError: If required fields are missing or the status is invalid
    """
    missing = [field for field in REQUIRED_FIELDS if not data.get(field)]
    missing += [field for field in TEXT_FIELDS if data.get(field) is None]
    missing += [field for field in LIST_FIELDS if not isinstance(data.get(field), list)]
    if missing:
        raise SchemaError(
            f"AI response is missing required fields: {', '.join(missing)}.",
            details={"missing": missing},
        )

    valid_statuses = [status.value for status in DeforestationStatus]
    if data["status"] not in valid_statuses:
        raise SchemaError(
            f"AI response has an invalid status: '{data['status']}'.",
            details={"status": data["status"], "allowed": valid_statuses},
        )

    try:
        sources = merge_sources(_declared_sources(data.get("sources")), grounding_sources)
        return AnalysisResult.model_validate({**data, "sources": sources})
    except ValidationError as e:
        logger.error(f"AI response failed schema validation: {e}")
        raise SchemaError(
            "AI response is missing required fields or has an invalid status.",
            details={"errors": e.errors(include_url=False, include_input=False, include_context=False)},
        )
