"""
Setup script for journey-engine.

Journey Engine is the client-side learning journey core of the student
platform. It serves three roles:

1. Home initialization - Sequential, failure-tolerant backend fetches
2. Journey evaluation - Normalize, classify and bucket enrollment records
3. Navigation - Pick the next screen and the right identifier namespace
"""

from setuptools import find_namespace_packages, setup

setup(
    name="journey-engine",
    version="1.0.0",
    description="Learning journey engine - home initialization, course classification and navigation",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Right Learning",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Deadlines
        "python-dateutil>=2.8.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="learning journey lms navigation education",
)
