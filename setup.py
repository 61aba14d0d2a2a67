from setuptools import setup, find_packages

setup(
    name="amalgam_engine",
    version="0.1.0",
    packages=find_packages(exclude=["amalgam_engine.tests"]),
    install_requires=[
        "numpy>=1.24.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    python_requires=">=3.9",
)
