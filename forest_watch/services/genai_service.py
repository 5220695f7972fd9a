import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types

from forest_watch.config.settings import Settings
from forest_watch.models.schemas import DataSource
from forest_watch.services.response_parser import source_title
from forest_watch.utils.error_handler import NetworkError

logger = logging.getLogger(__name__)

@dataclass
class TextReply:
    """Text returned by the model plus any search-grounding citations."""
    text: str
    grounding_sources: List[DataSource] = field(default_factory=list)

class GenAIService:
    """
    Thin wrapper around a google-genai client.

    The client is passed in rather than created at import time, so tests and
    alternative deployments can substitute their own.
    """

    def __init__(self, client: Any, text_model: str, image_model: str):
        self.client = client
        self.text_model = text_model
        self.image_model = image_model

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenAIService":
        """
        Build the service from application settings.

        Raises:
            ConfigError: If GEMINI_API_KEY is not configured
        """
        api_key = settings.require_api_key()
        logger.info(f"Initializing Google GenAI client with text model {settings.text_model} "
                    f"and image model {settings.image_model}")
        client = genai.Client(api_key=api_key)
        return cls(client, settings.text_model, settings.image_model)

    def get_status(self) -> Dict[str, Any]:
        """
        Get the current status of GenAI.

        Returns:
            Dictionary with status information
        """
        return {
            "initialized": self.client is not None,
            "error": None,
            "model": self.text_model,
            "image_model": self.image_model,
        }

    async def generate_text(self, prompt: str, temperature: float, use_search: bool = False) -> TextReply:
        """
        Generate text with the configured text model.

        Args:
            prompt: The prompt to send
            temperature: Sampling temperature
            use_search: Enable Google Search grounding

        Returns:
            The reply text and grounding citations

        Raises:
            NetworkError: If the call to the model fails
        """
        # Run the generation in a thread pool to avoid blocking
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            None, lambda: self._generate_text_sync(prompt, temperature, use_search)
        )

    def _generate_text_sync(self, prompt: str, temperature: float, use_search: bool) -> TextReply:
        tools = [types.Tool(google_search=types.GoogleSearch())] if use_search else None
        config = types.GenerateContentConfig(temperature=temperature, tools=tools)

        logger.debug(f"Sending prompt to {self.text_model} (search={use_search}): {prompt[:100]}...")
        start_time = time.monotonic()
        try:
            response = self.client.models.generate_content(
                model=self.text_model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            logger.error(f"Error during Gemini API call ({type(e).__name__}): {message}")
            raise NetworkError(message, details={"model": self.text_model})

        logger.info(f"Gemini API call completed in {time.monotonic() - start_time:.2f} seconds.")
        return TextReply(text=response.text or "", grounding_sources=self._grounding_sources(response))

    @staticmethod
    def _grounding_sources(response: Any) -> List[DataSource]:
        """Collect web citations from the first candidate's grounding metadata."""
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return []

        metadata = getattr(candidates[0], "grounding_metadata", None)
        chunks = getattr(metadata, "grounding_chunks", None) or []

        sources = []
        for chunk in chunks:
            web = getattr(chunk, "web", None)
            if web is None or not getattr(web, "uri", None):
                continue
            sources.append(DataSource(title=source_title(web.title, web.uri), url=web.uri))
        return sources

    async def generate_image(self, prompt: str, mime_type: str = "image/jpeg",
                             aspect_ratio: str = "16:9") -> Optional[bytes]:
        """
        Generate exactly one image with the configured image model.

        Returns:
            The raw image bytes, or None if the service returned no image

        Raises:
            NetworkError: If the call to the model fails
        """
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            None, lambda: self._generate_image_sync(prompt, mime_type, aspect_ratio)
        )

    def _generate_image_sync(self, prompt: str, mime_type: str, aspect_ratio: str) -> Optional[bytes]:
        config = types.GenerateImagesConfig(
            number_of_images=1,
            output_mime_type=mime_type,
            aspect_ratio=aspect_ratio,
        )
        try:
            response = self.client.models.generate_images(
                model=self.image_model,
                prompt=prompt,
                config=config,
            )
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            logger.error(f"Error during image generation ({type(e).__name__}): {message}")
            raise NetworkError(message, details={"model": self.image_model})

        images = getattr(response, "generated_images", None) or []
        if not images or images[0].image is None:
            return None
        return images[0].image.image_bytes or None
