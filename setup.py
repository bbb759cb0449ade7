"""Setup configuration for the VaultSens Python client."""

from setuptools import setup, find_packages

setup(
    name="vaultsens",
    version="0.1.0",
    description="Python client for the VaultSens file storage and image transform API",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "requests>=2.31.0",
        "pyyaml>=6.0",
        "pillow>=10.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
)
