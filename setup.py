#!/usr/bin/env python3
"""Setup script for Issues to RSS."""
from setuptools import find_packages, setup

# Read version from package
with open("src/issues_to_rss/__init__.py", "r") as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.split("=")[1].strip().strip('"').strip("'")
            break

# Read long description from README
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="issues-to-rss",
    version=version,
    description="RSS feeds for the issues and pull requests of GitHub repositories",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Issues to RSS Team",
    author_email="example@example.com",
    url="https://github.com/meziantou/IssuesToRss",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"issues_to_rss": ["templates/*.j2"]},
    python_requires=">=3.10",
    install_requires=[
        "requests>=2.31.0",
        "Jinja2>=3.1.0",
        "Markdown>=3.5",
        "python-dateutil>=2.8.2",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "feedparser>=6.0.0",
            "beautifulsoup4>=4.12.0",
            "ruff>=0.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "issues-to-rss=issues_to_rss.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: News/Diary",
    ],
)
