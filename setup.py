"""
ModelZoo - Pretrained model repository for MXNet model families

Setup script for pip installation.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="modelzoo",
    version="0.1.0",
    author="ModelZoo Team",
    description="Pretrained model repository for MXNet model families",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
    ],
    python_requires=">=3.9",
    install_requires=[
        "torch>=2.0.0",
        "safetensors>=0.4.0",
        "requests>=2.28.0",
        "pyyaml>=6.0.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "numpy",
            "black>=23.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "modelzoo=modelzoo.cli:main",
        ],
    },
)
