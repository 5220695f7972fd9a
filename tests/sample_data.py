"""Shared fixtures data for the test suite."""

import json

SAMPLE_ANALYSIS = {
    "forestName": "Amazon Rainforest",
    "status": "Significant Deforestation Detected",
    "summary": "Clearing for cattle pasture and soy continued across the arc of deforestation.",
    "conclusion": "Without stronger enforcement, losses are likely to continue.",
    "areaLost": "approx. 12,000 sq km",
    "timePeriod": "2015-2023",
    "estimatedInitialArea": "approx. 100,000 sq km",
    "chartData": [
        {"year": 2015, "loss": 1000},
        {"year": 2016, "loss": 1200},
        {"year": 2017, "loss": 1300},
        {"year": 2018, "loss": 1400},
        {"year": 2019, "loss": 1500},
        {"year": 2020, "loss": 1400},
        {"year": 2021, "loss": 1300},
        {"year": 2022, "loss": 1400},
        {"year": 2023, "loss": 1500},
    ],
    "deforestationDrivers": [
        {"reason": "Cattle Ranching", "percentage": 70},
        {"reason": "Soy Cultivation", "percentage": 20},
        {"reason": "Logging", "percentage": 10},
    ],
    "sources": [
        {"title": "INPE PRODES", "url": "https://www.gov.br/inpe/prodes"},
        {"title": "Global Forest Watch", "url": "https://www.globalforestwatch.org/"},
    ],
}


def fenced(payload) -> str:
    """Wrap a payload the way the model often does: prose plus a ```json fence."""
    return f"Here is the analysis you asked for:\n```json\n{json.dumps(payload, indent=2)}\n```\nLet me know if you need more."
