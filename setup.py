#!/usr/bin/env python3
"""Setup script for Euro RSS."""
from setuptools import find_packages, setup

# Read version from package
with open("src/euro_rss/__init__.py", "r") as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.split("=")[1].strip().strip('"').strip("'")
            break

# Read long description from README
with open("README.md", "r") as f:
    long_description = f.read()

setup(
    name="euro-rss",
    version=version,
    description="RSS 2.0 feeds scraped from European institutional websites",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Euro RSS Team",
    author_email="example@example.com",
    url="https://github.com/example/euro-rss",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"euro_rss": ["templates/*.j2"]},
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.31.0",
        "urllib3>=1.26.0",
        "python-dateutil>=2.8.2",
        "python-dotenv>=1.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "jinja2>=3.1.0",
        "beautifulsoup4>=4.12.0",
        "flask>=3.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "feedparser>=6.0.0",
        ],
        "dev": [
            "ruff>=0.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "euro-rss=euro_rss.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: News/Diary",
    ],
)
