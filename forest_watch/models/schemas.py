from enum import Enum
from typing import Dict, List, Optional, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that speaks camelCase JSON on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class DeforestationStatus(str, Enum):
    """Overall verdict reported by the model"""
    SIGNIFICANT = "Significant Deforestation Detected"
    MINOR = "Minor Deforestation Detected"
    STABLE = "No Major Deforestation Detected"
    UNKNOWN = "Status Unknown"


class ChartDataPoint(CamelModel):
    """Forest loss for a single year, in sq km"""
    model_config = ConfigDict(frozen=True)

    year: int
    loss: float


class DeforestationDriver(CamelModel):
    """Share of the loss attributed to one cause"""
    model_config = ConfigDict(frozen=True)

    reason: str
    percentage: float


class DataSource(CamelModel):
    """A cited source; two sources are the same when their url matches"""
    model_config = ConfigDict(frozen=True)

    title: str
    url: str


class AnalysisResult(CamelModel):
    """Validated deforestation analysis built from one model response"""
    model_config = ConfigDict(frozen=True)

    forest_name: str
    status: DeforestationStatus
    summary: str
    conclusion: str
    area_lost: str  # e.g. "approx. 15,000 sq km"
    time_period: str  # e.g. "2015-2023"
    estimated_initial_area: str  # e.g. "approx. 6,000,000 sq km"
    chart_data: List[ChartDataPoint] = Field(default_factory=list)
    deforestation_drivers: List[DeforestationDriver] = Field(default_factory=list)
    sources: List[DataSource] = Field(default_factory=list)


class SeverityLevel(str, Enum):
    """Qualitative size of the loss, used to steer image generation"""
    IMPERCEPTIBLE = "imperceptible"
    MINOR = "minor"
    SIGNIFICANT = "significant"
    SEVERE = "severe"
    EXTREME = "extreme"


class VisualEvidence(CamelModel):
    """Generated before/after image plus the numbers that shaped it"""
    image_url: str  # data:image/jpeg;base64,...
    image_prompt: str
    loss_percentage: float
    severity: SeverityLevel


class DeepResearchResult(CamelModel):
    """Narrative returned by the deep research operation"""
    text: str


class AnalyzeRequest(CamelModel):
    """Request to analyze a named forest"""
    forest_name: str

    @field_validator('forest_name')
    @classmethod
    def validate_forest_name(cls, v):
        if not v or not v.strip():
            raise ValueError('forestName must not be empty')
        return v.strip()


class VisualEvidenceRequest(CamelModel):
    """Request to render a before/after image for an earlier analysis"""
    analysis_data: AnalysisResult
    start_year: Optional[int] = None
    end_year: Optional[int] = None


class DeepResearchRequest(CamelModel):
    """Request for a deeper narrative on an earlier analysis"""
    analysis_data: AnalysisResult


class ProxyRequest(BaseModel):
    """Body accepted by the proxy relay endpoint"""
    action: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)
