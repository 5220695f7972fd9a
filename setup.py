#!/usr/bin/env python3
"""
Setup script for Forest Watch.

This script installs the forest_watch package and the FastAPI entry module,
and registers the forest-watch command.
"""

from setuptools import setup, find_packages

# Read requirements from requirements.txt
with open("requirements.txt") as f:
    requirements = [line for line in f.read().splitlines() if line and not line.startswith("#")]

setup(
    name="forest-watch",
    version="1.0.0",
    description="AI-assisted deforestation analysis, visual evidence and deep research using Gemini",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["app"],
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0", "httpx>=0.25"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: GIS",
    ],
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "forest-watch=forest_watch.main:main",
        ],
    },
)
