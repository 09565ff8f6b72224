# setup.py
from setuptools import setup, find_packages

setup(
    name="rendermath",
    version="1.0.0",
    description="Vector/matrix math and float packing for real-time rendering",
    packages=find_packages(include=["rendermath", "rendermath.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
