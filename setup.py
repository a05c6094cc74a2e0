import os
from setuptools import setup, find_packages
from web2dl import __version__, __description__, __author__, __author_email__, __url__, __license__

def read_long_description():
    """Read README.md for PyPI long description (rendered as markdown)"""
    if os.path.exists("README.md"):
        with open("README.md", "r", encoding="utf-8") as f:
            return f.read()
    return __description__

# PyPI package setup configuration
# Modify the marked fields (STEP 1/2/3) before publishing to PyPI
setup(
    # -------------------------- STEP 1: BASIC INFO (MANDATORY MODIFY) --------------------------
    # Unique PyPI package name
    name="web2dl",
    version=__version__,
    author=__author__,
    author_email=__author_email__,
    description=__description__,
    long_description=read_long_description(),
    # Declare README as Markdown for PyPI page rendering
    long_description_content_type="text/markdown",
    # Project repo URL (GitHub/Gitee/GitLab)
    url=__url__,
    license=__license__,
    # Search keywords for PyPI (improve discoverability)
    keywords=["crawler", "downloader", "web2dl", "mp3", "mp4", "yt-dlp", "mirror"],
    # -------------------------------------------------------------------------------------------

    # -------------------------- STEP 2: PACKAGE STRUCTURE (NO MODIFY NEEDED) --------------------------
    # Auto discover all packages under the project root (tests are not shipped)
    packages=find_packages(exclude=["tests", "tests.*"]),
    # Include non-Python files (e.g., README, LICENSE) in the package
    include_package_data=True,
    # -------------------------------------------------------------------------------------------------

    # -------------------------- STEP 3: DEPENDENCIES (FIXED - MATCH TOOL REQUIREMENTS) --------------------------
    # Dependencies installed automatically with pip install web2dl
    # Specify minimum compatible versions for stability
    install_requires=[
        "beautifulsoup4>=4.12.0",
        "lxml>=4.9.0",
        "requests>=2.31.0",
        "yt-dlp>=2023.11.16"
    ],
    # Test-only dependencies: pip install web2dl[test]
    extras_require={
        "test": ["pytest>=7.0"]
    },
    # -----------------------------------------------------------------------------------------------------------

    # -------------------------- CLI ENTRY POINT (CRITICAL - NO MODIFY) --------------------------
    # Generate global CLI command: `web2dl` (instead of python web2dl/cli.py)
    # Format: command_name = package_name.file_name:main_function_name
    entry_points={
        "console_scripts": [
            "web2dl = web2dl.cli:main",
        ]
    },
    # -------------------------------------------------------------------------------------------

    # -------------------------- COMPATIBILITY (NO MODIFY NEEDED) --------------------------
    # Minimum Python version (yt-dlp requires 3.9+)
    python_requires=">=3.9",
    zip_safe=False,
    # PyPI classification tags (for package categorization)
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Multimedia :: Video"
    ]
    # -------------------------------------------------------------------------------------------
)
