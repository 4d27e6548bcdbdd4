"""Setup configuration for Cordscribe."""

from setuptools import setup, find_packages

setup(
    name="cordscribe",
    version="0.1.0",
    description="Fetch Discord channel history and turn it into fine-tuning datasets",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.5",
        "aiohttp>=3.9",
        "openai>=1.30",
        "prompt_toolkit>=3.0",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "cordscribe=cordscribe.main:main",
        ],
    },
)
