# setup.py
from setuptools import setup, find_packages

setup(
    name="hintrating",
    version="0.1.0",
    packages=find_packages(include=["hintrating", "hintrating.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "omegaconf",
        "hydra-core",
        "pydantic>=2",
        "numpy",
        "pandas",
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "hintrating=hintrating.main:main"
        ]
    }
)
