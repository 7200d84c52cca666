import os

from setuptools import setup, find_packages

# read the version without importing the package (and its dependencies)
with open(os.path.join("pamcore", "__init__.py")) as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.split("=")[1].strip().strip('"').strip("'")
            break

setup(
    name="pamcore",
    version=version,
    description="Partitioning around medoids (k-medoids) over point data "
                "or precomputed distance matrices.",
    packages=find_packages(include=["pamcore", "pamcore.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "scipy",
        "scikit-learn",
        "joblib",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "pamcore = pamcore.apps.main:main",
        ],
    },
)
