"""
Forest Watch package.

Asks Google's Gemini models to analyze deforestation for a named forest,
render before/after visual evidence, and write a deeper research narrative.
"""

__version__ = "1.0.0"
