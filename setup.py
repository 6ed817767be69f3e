"""Setup script for sbom-conformance-lib."""

from setuptools import find_packages, setup

setup(
    name="sbom-conformance-lib",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "kuzu>=0.3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
