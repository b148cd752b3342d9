"""
Setup script for the Agent Onboarding Engine
"""

from setuptools import setup, find_packages

setup(
    name="agent-onboarding-engine",
    version="0.1.0",
    description="Agent Onboarding Engine - Collect business details, build and refine an AI sales agent",
    author="Stack Consult",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.5.0",
        "httpx>=0.27.0",
        "requests>=2.31.0",
        "sseclient-py>=1.8.0",
        "streamlit>=1.37.0",
        "python-dotenv>=1.0.0",
        "redis>=5.0.0",
        "supabase>=2.4.0",
    ],
    extras_require={
        "test": ["pytest>=7.4.0"],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
