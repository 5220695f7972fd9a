"""
Client-side adapter for the proxy relay.

Exposes the same three operations as DeforestationService, but forwards
them to a running server so the Gemini credential never leaves it.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from forest_watch.models.schemas import AnalysisResult, VisualEvidence
from forest_watch.utils.error_handler import NetworkError

# Configure logging
logger = logging.getLogger(__name__)

PROXY_ENDPOINT = "/api/gemini-proxy"


class ProxyClient:
    """Client for the forest watch proxy endpoint."""

    def __init__(self, base_url: str, endpoint: str = PROXY_ENDPOINT, timeout: float = 120):
        """
        Initialize the proxy client.

        Args:
            base_url: Root URL of the server, e.g. http://localhost:8000
            endpoint: Path of the proxy relay route
            timeout: Total request timeout in seconds
        """
        self.url = f"{base_url.rstrip('/')}{endpoint}"
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def _call(self, action: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Post one action to the proxy.

        Raises:
            NetworkError: On transport failure, timeout, an unreadable body or a non-200 response
        """
        body = {"action": action, "payload": payload}
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.url, json=body) as response:
                    try:
                        data = await response.json(content_type=None)
                    except ValueError:
                        data = None
                    if not isinstance(data, dict):
                        logger.error(f"Proxy returned a non-JSON body for {action}: HTTP {response.status}")
                        raise NetworkError(f"Proxy returned an unreadable response (HTTP {response.status})",
                                           details={"status": response.status})
                    if response.status != 200:
                        message = data.get("error") or f"Proxy returned HTTP {response.status}"
                        logger.error(f"Proxy error for {action}: {response.status} - {message}")
                        raise NetworkError(message, details={"status": response.status})
                    return data
        except asyncio.TimeoutError:
            logger.error(f"Timed out waiting for proxy at {self.url}")
            raise NetworkError("The analysis server did not respond in time.")
        except aiohttp.ClientError as e:
            logger.error(f"Could not reach proxy at {self.url}: {e}")
            raise NetworkError(f"Could not reach the analysis server: {e}")

    async def analyze(self, forest_name: str) -> AnalysisResult:
        data = await self._call("analyze", {"forestName": forest_name})
        return AnalysisResult.model_validate(data)

    async def generate_visual(self, result: AnalysisResult, start_year: Optional[int] = None,
                              end_year: Optional[int] = None) -> VisualEvidence:
        payload: Dict[str, Any] = {"analysisData": result.to_wire()}
        if start_year is not None:
            payload["startYear"] = start_year
        if end_year is not None:
            payload["endYear"] = end_year
        data = await self._call("generateVisual", payload)
        return VisualEvidence.model_validate(data)

    async def deep_research(self, result: AnalysisResult) -> str:
        data = await self._call("deepResearch", {"analysisData": result.to_wire()})
        return data.get("text", "")
