"""
Setup script for viteset_client package

A client for the Viteset API that watches one blob and streams
updates whenever its value changes.
"""

from setuptools import setup, find_packages

setup(
    name="viteset-client",
    version="1.0.0",
    description="Viteset blob client with ETag-based change polling",
    author="Viteset",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.8.0",
        "loguru>=0.6.0",
        "pydantic>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "viteset-watch=viteset_client.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
