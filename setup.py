from setuptools import setup

with open("README.md") as f:
    long_description = f.read()

setup(
    name="SecStruct",
    version="0.2.0",
    packages=["secstruct"],
    package_dir={"": "src"},
    author="SecStruct developers",
    description="A Python library for RNA secondary structures: dot-bracket codec, pseudoknot detection and mountain metrics",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
    ],
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "ss-convert=secstruct.converter:main",
            "ss-distance=secstruct.distance:main",
            "rfam-reader=secstruct.rfam_reader:main",
            "count-structures=secstruct.combinatorics:main",
        ]
    },
    install_requires=[
        "numpy",
        "orjson",
        "pandas",
    ],
    extras_require={
        "test": [
            "hypothesis",
            "pytest",
        ]
    },
)
