from __future__ import annotations

from setuptools import find_namespace_packages, setup


setup(
    name="region-search",
    version="0.1.0",
    description="Locate page regions of a PDF between begin/end text patterns.",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["region_search", "region_search.*"]),
    python_requires=">=3.10",
    install_requires=[
        "polars",
        "pyarrow",
        "PyMuPDF",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
