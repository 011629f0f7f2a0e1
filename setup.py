# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for the Node Conductor execution engine
"""

from setuptools import setup, find_packages

setup(
    name="node-conductor",
    version="1.0.0",
    description="Execution-graph engine for declarative node trees with monotonic progress reporting",
    author="Jason Cafarelli",
    packages=find_packages(include=["conductor", "conductor.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ]
    },
)
