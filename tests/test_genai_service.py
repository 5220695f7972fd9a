"""
Tests for the google-genai gateway.

A MagicMock stands in for genai.Client; we check the request shape and how
responses are read back.
"""

import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from google.genai import types

from forest_watch.services.genai_service import GenAIService
from forest_watch.utils.error_handler import ConfigError, NetworkError


def grounded_response(text, chunks):
    metadata = SimpleNamespace(grounding_chunks=chunks)
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(grounding_metadata=metadata)])


class TestGenAIService(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.client = MagicMock()
        self.service = GenAIService(self.client, "gemini-2.5-flash", "imagen-4.0-generate-001")

    async def test_generate_text_with_search(self):
        self.client.models.generate_content.return_value = grounded_response(
            '{"forestName": "Amazon"}',
            [
                SimpleNamespace(web=SimpleNamespace(title="INPE", uri="https://www.gov.br/inpe")),
                SimpleNamespace(web=SimpleNamespace(title=None, uri="https://news.mongabay.com/2024/01/x")),
                SimpleNamespace(web=None),
            ],
        )

        reply = await self.service.generate_text("prompt", temperature=0.1, use_search=True)

        self.assertEqual(reply.text, '{"forestName": "Amazon"}')
        self.assertEqual(
            [(s.title, s.url) for s in reply.grounding_sources],
            [("INPE", "https://www.gov.br/inpe"),
             ("news.mongabay.com", "https://news.mongabay.com/2024/01/x")],
        )

        kwargs = self.client.models.generate_content.call_args.kwargs
        self.assertEqual(kwargs["model"], "gemini-2.5-flash")
        self.assertEqual(kwargs["contents"], "prompt")
        self.assertEqual(kwargs["config"].temperature, 0.1)
        self.assertEqual(len(kwargs["config"].tools), 1)
        self.assertIsNotNone(kwargs["config"].tools[0].google_search)

    async def test_generate_text_without_search(self):
        self.client.models.generate_content.return_value = SimpleNamespace(text="an image prompt", candidates=None)

        reply = await self.service.generate_text("prompt", temperature=0.3)

        self.assertEqual(reply.text, "an image prompt")
        self.assertEqual(reply.grounding_sources, [])
        self.assertFalse(self.client.models.generate_content.call_args.kwargs["config"].tools)

    async def test_generate_text_failure(self):
        self.client.models.generate_content.side_effect = RuntimeError("connection reset")

        with self.assertRaises(NetworkError) as ctx:
            await self.service.generate_text("prompt", temperature=0.1)
        self.assertEqual(ctx.exception.message, "connection reset")

    async def test_generate_image(self):
        image = SimpleNamespace(image=SimpleNamespace(image_bytes=b"jpeg"))
        self.client.models.generate_images.return_value = SimpleNamespace(generated_images=[image])

        data = await self.service.generate_image("a forest")

        self.assertEqual(data, b"jpeg")
        kwargs = self.client.models.generate_images.call_args.kwargs
        self.assertEqual(kwargs["model"], "imagen-4.0-generate-001")
        self.assertIsInstance(kwargs["config"], types.GenerateImagesConfig)
        self.assertEqual(kwargs["config"].number_of_images, 1)
        self.assertEqual(kwargs["config"].aspect_ratio, "16:9")
        self.assertEqual(kwargs["config"].output_mime_type, "image/jpeg")

    async def test_generate_image_empty(self):
        self.client.models.generate_images.return_value = SimpleNamespace(generated_images=[])

        self.assertIsNone(await self.service.generate_image("a forest"))

    def test_status(self):
        status = self.service.get_status()
        self.assertTrue(status["initialized"])
        self.assertEqual(status["model"], "gemini-2.5-flash")


class TestGenAIServiceFromSettings(unittest.TestCase):

    def test_missing_api_key_fails_fast(self):
        settings = MagicMock()
        settings.require_api_key.side_effect = ConfigError("The GEMINI_API_KEY environment variable is not set.")

        with self.assertRaises(ConfigError):
            GenAIService.from_settings(settings)

    @patch("forest_watch.services.genai_service.genai.Client")
    def test_client_built_from_settings(self, mock_client):
        settings = MagicMock()
        settings.require_api_key.return_value = "test_api_key"
        settings.text_model = "gemini-2.5-flash"
        settings.image_model = "imagen-4.0-generate-001"

        service = GenAIService.from_settings(settings)

        mock_client.assert_called_once_with(api_key="test_api_key")
        self.assertIs(service.client, mock_client.return_value)


if __name__ == '__main__':
    unittest.main()
