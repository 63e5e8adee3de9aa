#!/usr/bin/env python
"""Setup script for older pip versions.

stablecoin-issuer is configured in pyproject.toml; this file only lets
tools without PEP 517 support install it.
"""

from setuptools import setup

if __name__ == "__main__":
    setup()
