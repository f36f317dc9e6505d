# I'd have preferred a setup.cfg, but `pip -e` rejects it.

import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="lattecount",
    version="0.0.1",
    description="Lattice point counting and Ehrhart polynomials via LattE",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    packages=setuptools.find_packages(exclude=["test", "test.*"]),
    python_requires=">=3.7",
    install_requires=[
        "numpy",
        "sympy",
    ],
    extras_require={
        "test": [
            "ddt",
            "scipy",
        ],
    },
)
