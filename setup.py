from setuptools import setup, find_packages

setup(
    name="cbw_pkg",
    version="0.1.0",
    description="Dynamic body composition simulation for children (Hall et al. model)",
    author="CBW contributors",

    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pandas",
        "pydantic>=2",
        "structlog",
        "typer",
        "rich",
        "tomli; python_version < '3.11'",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["cbw=cbw_pkg.cli.main:app"],
    },
)
