#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
from pathlib import Path
from setuptools import setup

HERE = Path(os.path.abspath(__file__)).resolve().parent
README = (HERE / "readme.md").read_text()

setup(
    name="atlasctl",
    version="0.1.0",
    description="A command line tool and client library for managing custom database roles and Global Cluster settings through the MongoDB Atlas management API.",
    long_description=README,
    long_description_content_type="text/markdown",
    license="Apache-2.0",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    keywords="mongodb, atlas, custom roles, global clusters",
    python_requires=">=3.10",
    package_dir={"": "src/cli"},
    packages=[
        "atlasctl",
        "atlasctl.cmd",
        "atlasctl.core",
        "atlasctl.core.api",
        "atlasctl.core.logging",
        "atlasctl.core.resources",
    ],
    include_package_data=True,
    install_requires=[
        "click>=8.1.4,<9",
        "pydantic>=2.5",
        "PyYAML",
        "requests>=2.32.2",
    ],
    extras_require={
        "test": [
            "pytest",
            "requests-mock",
        ],
    },
    entry_points={"console_scripts": ["atlasctl=atlasctl.cli:cli"]},
)
