"""
Setup configuration for adlauncher package.
"""

from setuptools import setup, find_packages

setup(
    name="adlauncher",
    version="0.1.0",
    description="Batch-create Meta ads from a template ad and grouped creative files",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "pydantic-graph>=0.1.0,<2",
        "httpx>=0.27",
        "click>=8.0",
        "python-dotenv>=1.0",
        "logfire>=2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "adlauncher=adlauncher.cli.main:cli",
        ],
    },
)
