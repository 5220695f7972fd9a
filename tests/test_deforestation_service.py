"""
Tests for the deforestation service.

The Gemini gateway is replaced by a mock, so these run without network access.
"""

import base64
import copy
import json
import unittest
from unittest.mock import AsyncMock, MagicMock

from forest_watch.config.settings import Settings
from forest_watch.models.schemas import AnalysisResult, DataSource, SeverityLevel
from forest_watch.services.deforestation_service import DeforestationService
from forest_watch.services.genai_service import GenAIService, TextReply
from forest_watch.utils.error_handler import (
    GenerationError, NetworkError, ParseError, RequestError, SchemaError
)
from sample_data import SAMPLE_ANALYSIS, fenced


class DeforestationServiceTestCase(unittest.IsolatedAsyncioTestCase):
    """Common fixtures for the service tests."""

    def setUp(self):
        self.settings = MagicMock(spec=Settings)
        self.settings.analysis_temperature = 0.1
        self.settings.visual_prompt_temperature = 0.3
        self.settings.research_temperature = 0.5

        self.genai = MagicMock(spec=GenAIService)
        self.genai.generate_text = AsyncMock()
        self.genai.generate_image = AsyncMock()

        self.service = DeforestationService(self.genai, self.settings)
        self.payload = copy.deepcopy(SAMPLE_ANALYSIS)
        self.result = AnalysisResult.model_validate(SAMPLE_ANALYSIS)


class TestAnalyze(DeforestationServiceTestCase):

    async def test_analyze_merges_grounding_sources(self):
        """Fenced JSON plus grounding citations that repeat a declared url."""
        self.genai.generate_text.return_value = TextReply(
            text=fenced(self.payload),
            grounding_sources=[
                DataSource(title="PRODES annual report", url="https://www.gov.br/inpe/prodes"),
                DataSource(title="MapBiomas", url="https://mapbiomas.org/"),
            ],
        )

        result = await self.service.analyze("Amazon Rainforest")

        urls = [source.url for source in result.sources]
        self.assertEqual(urls.count("https://www.gov.br/inpe/prodes"), 1)
        self.assertEqual(len(urls), 3)
        shared = next(s for s in result.sources if s.url == "https://www.gov.br/inpe/prodes")
        self.assertEqual(shared.title, "INPE PRODES")

        self.genai.generate_text.assert_awaited_once()
        args, kwargs = self.genai.generate_text.call_args
        self.assertIn('"Amazon Rainforest"', args[0])
        self.assertEqual(kwargs["temperature"], 0.1)
        self.assertTrue(kwargs["use_search"])

    async def test_analyze_invalid_status(self):
        self.payload["status"] = "Probably Fine"
        self.genai.generate_text.return_value = TextReply(text=json.dumps(self.payload))

        with self.assertRaises(SchemaError) as ctx:
            await self.service.analyze("Amazon Rainforest")
        self.assertIn("invalid status", ctx.exception.message)

    async def test_analyze_unparseable_response(self):
        self.genai.generate_text.return_value = TextReply(text="Sorry, I can't help with that.")

        with self.assertRaises(ParseError) as ctx:
            await self.service.analyze("Amazon Rainforest")
        self.assertIn("Please try your search again", ctx.exception.message)

    async def test_analyze_network_failure(self):
        self.genai.generate_text.side_effect = NetworkError("API key not valid.")

        with self.assertRaises(NetworkError) as ctx:
            await self.service.analyze("Amazon Rainforest")
        self.assertEqual(ctx.exception.message, "API key not valid.")

    async def test_analyze_unexpected_failure(self):
        self.genai.generate_text.side_effect = RuntimeError("socket closed")

        with self.assertRaises(NetworkError) as ctx:
            await self.service.analyze("Amazon Rainforest")
        self.assertIn("Failed to get a valid analysis", ctx.exception.message)

    async def test_analyze_requires_name(self):
        with self.assertRaises(RequestError):
            await self.service.analyze("   ")
        self.genai.generate_text.assert_not_awaited()


class TestGenerateVisual(DeforestationServiceTestCase):

    async def test_generate_visual_uses_loss_severity(self):
        self.genai.generate_text.return_value = TextReply(text="  Split-screen satellite view of the Amazon...  ")
        self.genai.generate_image.return_value = b"\xff\xd8jpeg-bytes"

        evidence = await self.service.generate_visual(self.result, 2015, 2023)

        self.assertAlmostEqual(evidence.loss_percentage, 12.0)
        self.assertEqual(evidence.severity, SeverityLevel.SIGNIFICANT)
        self.assertEqual(evidence.image_prompt, "Split-screen satellite view of the Amazon...")
        self.assertEqual(
            evidence.image_url,
            "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8jpeg-bytes").decode("ascii"),
        )

        args, kwargs = self.genai.generate_text.call_args
        self.assertIn("clear and significant", args[0])
        self.assertIn("2015", args[0])
        self.assertIn("2023", args[0])
        self.assertEqual(kwargs["temperature"], 0.3)
        self.genai.generate_image.assert_awaited_once_with("Split-screen satellite view of the Amazon...")

    async def test_generate_visual_derives_years(self):
        self.genai.generate_text.return_value = TextReply(text="prompt")
        self.genai.generate_image.return_value = b"img"

        await self.service.generate_visual(self.result)

        args, _ = self.genai.generate_text.call_args
        self.assertIn("Before: ~2015", args[0])
        self.assertIn("After: ~2023", args[0])

    async def test_generate_visual_without_image(self):
        self.genai.generate_text.return_value = TextReply(text="prompt")
        self.genai.generate_image.return_value = None

        with self.assertRaises(GenerationError) as ctx:
            await self.service.generate_visual(self.result, 2015, 2023)
        self.assertIn("failed to generate", ctx.exception.message)

    async def test_generate_visual_network_failure(self):
        self.genai.generate_text.return_value = TextReply(text="prompt")
        self.genai.generate_image.side_effect = NetworkError("quota exceeded")

        with self.assertRaises(NetworkError) as ctx:
            await self.service.generate_visual(self.result, 2015, 2023)
        self.assertIn("failed to generate a visual representation", ctx.exception.message)
        self.assertEqual(ctx.exception.details["error"], "quota exceeded")


class TestDeepResearch(DeforestationServiceTestCase):

    async def test_deep_research_returns_trimmed_text(self):
        self.genai.generate_text.return_value = TextReply(text="\n  Deeper sources broadly confirm...  \n")

        text = await self.service.deep_research(self.result)

        self.assertEqual(text, "Deeper sources broadly confirm...")
        args, kwargs = self.genai.generate_text.call_args
        self.assertIn(self.result.summary, args[0])
        self.assertEqual(kwargs["temperature"], 0.5)
        self.assertTrue(kwargs["use_search"])

    async def test_deep_research_empty_text(self):
        self.genai.generate_text.return_value = TextReply(text="   ")

        with self.assertRaises(GenerationError):
            await self.service.deep_research(self.result)

    async def test_deep_research_network_failure(self):
        self.genai.generate_text.side_effect = NetworkError("503 UNAVAILABLE")

        with self.assertRaises(NetworkError) as ctx:
            await self.service.deep_research(self.result)
        self.assertIn("deep research", ctx.exception.message)


if __name__ == '__main__':
    unittest.main()
