from setuptools import setup, find_packages

setup(
    name="jsonrpc-kit",
    version="0.1.0",
    description="JSON-RPC 2.0 server and client core with batch, cookie session and typed error support",
    author="jsonrpc-kit contributors",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "httpx>=0.24.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-cov",
        ],
        "examples": [
            "fastapi>=0.100.0",
            "uvicorn>=0.23.0",
        ],
    },
    python_requires=">=3.9",
)
