"""
recencycache - Fixed-Capacity LRU Cache

An in-memory key/value cache with least-recently-used eviction and O(1)
get/put, plus thread-safe and asyncio wrappers.
"""

import os
import re
from setuptools import setup, find_packages

# Read the README for the long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Get package version
with open(os.path.join("recencycache", "__init__.py"), "r", encoding="utf-8") as f:
    version_match = re.search(r'^__version__ = ["\']([^\"\']+)[\"\']', f.read(), re.MULTILINE)
    if version_match:
        VERSION = version_match.group(1)
    else:
        raise RuntimeError("Unable to find version string in recencycache/__init__.py")

# Core dependencies
install_requires = [
    "pydantic>=2.0.0,<3.0.0",
    "attrs>=22.2.0",
]

# Optional dependencies
extras_require = {
    # Development and testing
    "dev": [
        "pytest>=7.0.0",
        "pytest-asyncio>=0.20.0",
        "pytest-cov>=4.0.0",
        "black>=22.0.0",
        "isort>=5.0.0",
        "mypy>=0.990",
    ],
}

setup(
    name="recencycache",
    version=VERSION,
    author="recencycache contributors",
    description="A fixed-capacity in-memory LRU cache with O(1) get and put",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    package_data={
        "recencycache": ["py.typed"],
    },
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Software Development",
        "Topic :: Software Development :: Libraries",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Typing :: Typed",
    ],
    keywords=[
        "cache",
        "lru",
        "lru-cache",
        "data-structures",
    ],
    zip_safe=False,
)
