"""
Prompt construction for the Gemini calls.

Each builder returns the complete instruction string, including the output
contract the model has to follow. They are pure string formatting.
"""

from forest_watch.models.schemas import AnalysisResult, DeforestationStatus

STATUS_CHOICES = ", ".join(f"'{status.value}'" for status in DeforestationStatus)


def build_analysis_prompt(forest_name: str) -> str:
    """
    Build the prompt that asks for a structured deforestation analysis.

    Args:
        forest_name: Name of the forest to analyze

    Returns:
        The prompt text
    """
    return f"""
Analyze deforestation status for "{forest_name}".
Act as an expert environmental data analyst. Use the provided Google Search results to find the most up-to-date and accurate data available, ideally up to the last full year.
Your response MUST be a single JSON object string and nothing else. Do not include markdown formatting like ```json.
The JSON object must conform to this structure:
{{
  "forestName": "string",
  "status": "string (Enum: {STATUS_CHOICES})",
  "summary": "string (A concise summary of the findings)",
  "conclusion": "string (A concluding thought or forward-looking outlook on the forest's future based on the data.)",
  "areaLost": "string (e.g., 'approx. 15,000 sq km')",
  "timePeriod": "string (e.g., '2015-2023')",
  "estimatedInitialArea": "string (The estimated total forest area in sq km at the beginning of the time period, e.g., 'approx. 6,000,000 sq km')",
  "chartData": [ {{ "year": "number", "loss": "number" }} ],
  "deforestationDrivers": [ {{ "reason": "string (e.g., 'Cattle Ranching', 'Soy Cultivation', 'Logging', 'Wildfires')", "percentage": "number" }} ],
  "sources": [ {{ "title": "string", "url": "string" }} ]
}}
IMPORTANT: The 'chartData' array must contain a data point for EVERY SINGLE YEAR within the specified 'timePeriod'. If data for a specific year is unavailable from sources, you can estimate it based on the trend or report it as zero, but the year must be present to ensure a complete graph.
In addition, identify the primary drivers of deforestation (e.g., agriculture, logging, mining, wildfires) for this forest over the analyzed period and populate the 'deforestationDrivers' array. The percentages should be your best estimate based on the sources and should ideally sum to 100, but approximations are acceptable.
Synthesize information from the search results to populate all fields. The 'sources' array in the JSON should include any primary sources you identified within the search results.
Do not invent data. If a specific piece of information isn't in the search results, reflect that appropriately (e.g., an empty array for chartData or deforestationDrivers, or a note in the summary).
""".strip()


def build_visual_prompt_request(
    result: AnalysisResult,
    start_year: int,
    end_year: int,
    severity_text: str,
    total_loss: float,
    loss_percentage: float,
) -> str:
    """
    Build the prompt asking the text model to write an image-generation prompt.

    The severity text is embedded verbatim so the image model is told exactly
    how much change to draw on the 'after' side.
    """
    forest = result.forest_name
    return f"""
Based on the deforestation analysis for "{forest}", create a single, concise, and highly descriptive prompt for an image generation AI (like Imagen). The goal is a data-driven, realistic satellite comparison between the years {start_year} and {end_year}.

First, identify the key visual characteristics of the "{forest}". Consider its biome (e.g., tropical rainforest, boreal forest, temperate deciduous), typical flora (e.g., broadleaf trees, conifers), and geographical features (e.g., winding rivers, mountainous terrain, flat plains).

Then, construct the prompt to describe a satellite image comparison, presented side-by-side in a split-screen view with a clear but thin dividing line.

- Incorporate the specific visual characteristics you identified. For example, if it's the Amazon, mention "dense tropical canopy and a meandering river". If it's the Congo, "vast swathes of dark green, humid rainforest".
- The 'before' image (left side) should depict the forest from around {start_year}, showing a lush, dense, and vibrant green canopy under a clear sky, true to its biome.
- The 'after' image (right side) must depict the same area around {end_year}. The visual change MUST be a direct and unambiguous representation of the deforestation data. Your prompt to the image model must contain the following specific instructions: "{severity_text}". Emphasize that the visual cues described are not optional and must be rendered clearly.
- The style must be "ultra-realistic 4k satellite photography".
- Include small, unobtrusive text labels 'Before: ~{start_year}' and 'After: ~{end_year}' on their respective sides.

Analysis Data Context (for overall trend):
- Forest Name: {forest}
- Status: {result.status.value}
- Total Loss: {total_loss:,.0f} sq km over {result.time_period}
- Percentage Loss: ~{loss_percentage:.1f}%

Generate ONLY the image prompt text and nothing else.
""".strip()


def build_deep_research_prompt(result: AnalysisResult) -> str:
    """Build the prompt for the follow-up deep research narrative."""
    return f"""
You are an expert environmental data analyst who has already performed an initial analysis for "{result.forest_name}". Now, you must conduct a "deep research" investigation.

Your task is to re-evaluate your initial findings and provide a more nuanced, detailed narrative. Use Google Search again, but this time, specifically look for corroborating or conflicting reports from more niche, authoritative sources like academic journals, environmental NGO publications (e.g., WWF, Greenpeace), government environmental agencies, and indigenous rights organizations.

Initial Analysis Context:
- Forest Name: {result.forest_name}
- Status: {result.status.value}
- Summary: {result.summary}
- Area Lost: {result.area_lost} over {result.time_period}

Your deep research response should be a single text block (2-4 paragraphs) that addresses the following:
1.  **Corroboration & Nuance:** Do the deeper sources confirm the initial findings? Add more specific details. For instance, if the initial summary mentioned agriculture as a driver, the deep research should specify *what kind* of agriculture (e.g., soy, palm oil, cattle ranching).
2.  **Conflicting Data or Perspectives:** Did you find any data that conflicts with the initial analysis? Are there different viewpoints on the severity or causes of deforestation in this region?
3.  **Root Causes & Impacts:** Briefly touch upon the underlying socio-economic drivers (e.g., government policies, illegal logging, poverty) and the ecological or social impacts (e.g., biodiversity loss, displacement of communities) mentioned in your new sources.
4.  **Data Confidence:** Conclude with a sentence about your confidence in the overall analysis, given the available data.

Provide ONLY the text of your deep research findings. Do not repeat the initial analysis data.
""".strip()
