"""Setup script for vencode."""

from setuptools import setup, find_packages

setup(
    name="vencode",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "loguru>=0.7.0",
        "pydantic>=2.0.0",
        "tqdm>=4.65.0",
        "click>=8.0.0",
        "ffmpeg-python>=0.2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "vencode=vencode.cli:main",
            "vencode-batch=vencode.cli:batch",
            "vencode-validate=vencode.cli:validate",
            "vencode-scale=vencode.cli:scale",
            "vencode-chapters=vencode.cli:chapters",
        ],
    },
)
