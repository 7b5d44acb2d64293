from setuptools import setup, find_packages

setup(
    name="parksim",
    version="0.1.0",
    description="Discrete event simulation of a multi-zone parking facility",
    author="adamfilli",
    packages=find_packages(include=["parksim", "parksim.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
        "scipy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
