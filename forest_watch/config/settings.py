import os
from typing import Optional
import logging

from forest_watch.utils.error_handler import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "imagen-4.0-generate-001"

class Settings:
    """
    Application settings loaded from environment variables with validation.
    """

    def __init__(self):
        # GenAI settings
        self.gemini_api_key = self._get_env("GEMINI_API_KEY")
        self.text_model = self._get_env("GEMINI_TEXT_MODEL", DEFAULT_TEXT_MODEL)
        self.image_model = self._get_env("GEMINI_IMAGE_MODEL", DEFAULT_IMAGE_MODEL)

        # Sampling temperatures per operation
        self.analysis_temperature = float(self._get_env("ANALYSIS_TEMPERATURE", "0.1"))
        self.visual_prompt_temperature = float(self._get_env("VISUAL_PROMPT_TEMPERATURE", "0.3"))
        self.research_temperature = float(self._get_env("RESEARCH_TEMPERATURE", "0.5"))

        # Server settings
        self.host = self._get_env("HOST", "0.0.0.0")
        self.port = int(self._get_env("PORT", "8000"))
        self.reload = self._get_env("RELOAD", "false").lower() == "true"
        self.log_level = self._get_env("LOG_LEVEL", "INFO").upper()

        # Where the CLI / proxy client find a running server
        self.proxy_url = self._get_env("PROXY_URL", f"http://localhost:{self.port}")

        # Validate configuration
        self._validate_config()

    def _get_env(self, key: str, default: Optional[str] = None) -> str:
        """
        Get an environment variable or return a default value
        """
        value = os.environ.get(key, default)
        if value is None:
            logger.warning(f"Environment variable {key} not set")
        return value

    def _validate_config(self):
        """
        Validate configuration and log warnings for missing values
        """
        if not self.gemini_api_key:
            logger.warning("GEMINI_API_KEY not set. GenAI functionality will be unavailable.")

    def require_api_key(self) -> str:
        """
        Return the Gemini API key, failing fast when it is missing.

        Raises:
            ConfigError: If GEMINI_API_KEY is not configured
        """
        if not self.gemini_api_key:
            logger.critical("CRITICAL: GEMINI_API_KEY environment variable is not set!")
            raise ConfigError("The GEMINI_API_KEY environment variable is not set.")
        return self.gemini_api_key

    def __str__(self) -> str:
        """
        Return a string representation of the settings, masking sensitive values
        """
        return (
            f"Settings("
            f"gemini_api_key={'*****' if self.gemini_api_key else None}, "
            f"text_model={self.text_model}, "
            f"image_model={self.image_model}, "
            f"analysis_temperature={self.analysis_temperature}, "
            f"visual_prompt_temperature={self.visual_prompt_temperature}, "
            f"research_temperature={self.research_temperature}, "
            f"host={self.host}, "
            f"port={self.port}, "
            f"reload={self.reload}, "
            f"log_level={self.log_level}, "
            f"proxy_url={self.proxy_url}"
            f")"
        )
