import base64
import logging
from typing import Optional

from forest_watch.config.settings import Settings
from forest_watch.models.schemas import AnalysisResult, VisualEvidence
from forest_watch.services.genai_service import GenAIService
from forest_watch.services.prompts import (
    build_analysis_prompt,
    build_deep_research_prompt,
    build_visual_prompt_request,
)
from forest_watch.services.response_parser import extract_json, validate_analysis
from forest_watch.services.severity import (
    classify_severity,
    derive_year_range,
    loss_percentage,
    total_loss,
)
from forest_watch.utils.error_handler import AppError, GenerationError, NetworkError, RequestError

logger = logging.getLogger(__name__)

ANALYSIS_FAILED = ("Failed to get a valid analysis from the AI. "
                   "The web search might not have returned sufficient data.")
VISUAL_FAILED = ("The AI failed to generate a visual representation. "
                 "This can happen with complex or ambiguous data.")
RESEARCH_FAILED = ("The AI failed to conduct a deep research analysis. "
                   "The web search may not have returned sufficient data for a deeper dive.")

class DeforestationService:
    """
    The three deforestation operations: analyze, generate_visual and deep_research.

    Every operation is stateless; callers keep the AnalysisResult from
    analyze() and pass it back in for the follow-up operations.
    """

    def __init__(self, genai_service: GenAIService, settings: Optional[Settings] = None):
        self.genai = genai_service
        self.settings = settings or Settings()

    async def analyze(self, forest_name: str) -> AnalysisResult:
        """
        Analyze deforestation for a named forest.

        Args:
            forest_name: Forest to analyze, e.g. "Amazon Rainforest"

        Returns:
            The validated analysis, with declared and grounding sources merged

        Raises:
            AppError: ParseError, SchemaError or NetworkError with a caller-facing message
        """
        if not forest_name or not forest_name.strip():
            raise RequestError("Missing forestName")
        forest_name = forest_name.strip()

        try:
            logger.info(f"Analyzing deforestation for: {forest_name}")
            reply = await self.genai.generate_text(
                build_analysis_prompt(forest_name),
                temperature=self.settings.analysis_temperature,
                use_search=True,
            )
            result = validate_analysis(extract_json(reply.text), reply.grounding_sources)
            logger.info(f"Analysis for {result.forest_name}: {result.status.value}, "
                        f"{len(result.sources)} sources")
            return result
        except AppError as e:
            logger.error(f"Error fetching or parsing data from Gemini API: {e.message}")
            raise
        except Exception as e:
            logger.exception(f"Unexpected error analyzing {forest_name}: {e}")
            raise NetworkError(ANALYSIS_FAILED, details={"error": str(e)})

    async def generate_visual(self, result: AnalysisResult, start_year: Optional[int] = None,
                              end_year: Optional[int] = None) -> VisualEvidence:
        """
        Render a before/after satellite-style image for an analysis.

        The text model first writes an image prompt that carries the loss
        severity, then the image model renders it.

        Args:
            result: A previous analysis
            start_year: Year shown on the 'before' side; derived from the analysis when omitted
            end_year: Year shown on the 'after' side; derived from the analysis when omitted

        Returns:
            The image as a JPEG data URL, with the prompt and severity used

        Raises:
            GenerationError: If the image service returns no image
            NetworkError: If either model call fails
        """
        if start_year is None or end_year is None:
            derived = derive_year_range(result)
            if derived is None:
                raise RequestError("Missing startYear/endYear and none could be derived from the analysis.")
            start_year = derived[0] if start_year is None else start_year
            end_year = derived[1] if end_year is None else end_year

        loss = total_loss(result)
        percentage = loss_percentage(result)
        severity = classify_severity(percentage, result.status)
        logger.info(f"Visual evidence for {result.forest_name} {start_year}-{end_year}: "
                    f"{percentage:.1f}% loss, severity {severity.level.value}")

        try:
            prompt_reply = await self.genai.generate_text(
                build_visual_prompt_request(result, start_year, end_year, severity.description,
                                            loss, percentage),
                temperature=self.settings.visual_prompt_temperature,
            )
            image_prompt = prompt_reply.text.strip()
            if not image_prompt:
                raise GenerationError(f"{VISUAL_FAILED} The AI returned an empty image prompt.")
            logger.info(f"Generated Image Prompt: {image_prompt}")

            image_bytes = await self.genai.generate_image(image_prompt)
            if not image_bytes:
                raise GenerationError(f"{VISUAL_FAILED} Image generation failed to return image data.")
        except AppError as e:
            logger.error(f"Error during visual evidence generation: {e.message}")
            if isinstance(e, GenerationError):
                raise
            raise NetworkError(VISUAL_FAILED, details={"error": e.message})
        except Exception as e:
            logger.exception(f"Unexpected error during visual evidence generation: {e}")
            raise NetworkError(VISUAL_FAILED, details={"error": str(e)})

        encoded = base64.b64encode(image_bytes).decode("ascii")
        return VisualEvidence(
            image_url=f"data:image/jpeg;base64,{encoded}",
            image_prompt=image_prompt,
            loss_percentage=percentage,
            severity=severity.level,
        )

    async def deep_research(self, result: AnalysisResult) -> str:
        """
        Produce a deeper narrative investigation of an analysis.

        Raises:
            GenerationError: If the model returns no text
            NetworkError: If the model call fails
        """
        try:
            logger.info(f"Running deep research for: {result.forest_name}")
            reply = await self.genai.generate_text(
                build_deep_research_prompt(result),
                temperature=self.settings.research_temperature,
                use_search=True,
            )
        except AppError as e:
            logger.error(f"Error during deep research: {e.message}")
            raise NetworkError(RESEARCH_FAILED, details={"error": e.message})
        except Exception as e:
            logger.exception(f"Unexpected error during deep research: {e}")
            raise NetworkError(RESEARCH_FAILED, details={"error": str(e)})

        text = reply.text.strip()
        if not text:
            raise GenerationError(f"{RESEARCH_FAILED} The AI returned an empty response.")
        return text

def create_deforestation_service(settings: Settings) -> DeforestationService:
    """
    Build the service with a real Gemini client.

    Raises:
        ConfigError: If GEMINI_API_KEY is not configured
    """
    return DeforestationService(GenAIService.from_settings(settings), settings)
