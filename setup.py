"""Setup script for the project."""

from setuptools import setup, find_packages

setup(
    name="fitfusion-api",
    version="1.0.0",
    description="Fitness tracking API with goal recommendations, progress reports and challenges",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi>=0.104",
        "uvicorn>=0.24",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "motor>=3.3",
        "pymongo>=4.6",
        "python-jose[cryptography]>=3.3",
        "passlib[argon2]>=1.7.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "httpx>=0.25",
            "mongomock>=4.1",
        ],
    },
    python_requires=">=3.10",
)
