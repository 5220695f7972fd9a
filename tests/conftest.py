import os
import sys
import copy

import pytest

# Add the parent directory to the path to allow importing from the project
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from forest_watch.models.schemas import AnalysisResult
from sample_data import SAMPLE_ANALYSIS


@pytest.fixture
def sample_payload():
    """Raw camelCase analysis payload as the model would return it."""
    return copy.deepcopy(SAMPLE_ANALYSIS)


@pytest.fixture
def sample_result():
    """Validated AnalysisResult built from the sample payload."""
    return AnalysisResult.model_validate(SAMPLE_ANALYSIS)
