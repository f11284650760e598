"""setuptools setup for pomotimer.

Install the ``pomo`` command:
    pip install .
    pip install -e ".[test]"     # with the test tools
"""

from setuptools import setup, find_packages

setup(
    name="pomotimer",
    version="0.1.0",
    description="Pomodoro timer that mirrors its countdown to your Slack status",
    packages=find_packages(include=["pomotimer", "pomotimer.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6",
        "numpy",
        "typer",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "pomo = pomotimer.cli:main",
        ],
    },
)
