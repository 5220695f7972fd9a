"""
Data models for the application.
"""

from .schemas import (
    DeforestationStatus, ChartDataPoint, DeforestationDriver, DataSource,
    AnalysisResult, SeverityLevel, VisualEvidence, DeepResearchResult,
    AnalyzeRequest, VisualEvidenceRequest, DeepResearchRequest, ProxyRequest
)

__all__ = [
    'DeforestationStatus', 'ChartDataPoint', 'DeforestationDriver', 'DataSource',
    'AnalysisResult', 'SeverityLevel', 'VisualEvidence', 'DeepResearchResult',
    'AnalyzeRequest', 'VisualEvidenceRequest', 'DeepResearchRequest', 'ProxyRequest'
]
