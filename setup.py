"""
Setup script for joyo-drill.

Joyo Drill is a terminal flashcard drill for the Joyo kanji with a
hands-free control mode. It serves two roles:

1. Study Companion - New and review sessions from the terminal
2. Gesture Engine - Pose classification and dwell confirmation that turn
   held body poses into quiz actions, embeddable in any host with a camera

The 'joyo' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="joyo-drill",
    version="1.0.0",
    description="Joyo kanji flashcard drill with gesture-driven quiz control",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["joyo", "joyo.*"]),
    py_modules=["config"],
    package_data={"joyo": ["data/*.json"]},
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "joyo=joyo.cli.joyo_cli:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="kanji japanese flashcards drill gesture pose cli education",
)
