#!/usr/bin/env python3
"""
Setup configuration for Raster PDF Export
Bitmap to paginated A4 PDF export library and command line tool
"""

from setuptools import setup, find_packages
import sys
from pathlib import Path

# Read version from version file or default
VERSION = "1.0.0"
try:
    if Path("src/raster_pdf_export/version.py").exists():
        sys.path.insert(0, "src/raster_pdf_export")
        from version import VERSION
except ImportError:
    pass

# Read long description from README
try:
    with open("README.md", "r", encoding="utf-8") as fh:
        LONG_DESCRIPTION = fh.read()
except FileNotFoundError:
    LONG_DESCRIPTION = """
    Raster PDF Export

    Turns a rendered bitmap of a UI region, an image or a PDF page into an A4
    PDF with one JPEG per page. Content is fitted within the margins, rotated
    upright in pixel space and split into horizontal slices across pages when
    it is taller than one page.
    """

# Entry points for different installation methods
ENTRY_POINTS = {
    "console_scripts": [
        "raster-pdf-export=raster_pdf_export.main:main",
    ],
}

setup(
    name="raster-pdf-export",
    version=VERSION,
    description="Paginated image-per-page PDF export for rendered bitmaps",
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",

    # Package configuration
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    include_package_data=True,

    # Python version requirement
    python_requires=">=3.9",

    install_requires=[
        "PyMuPDF>=1.24.0",
        "reportlab>=4.1.0",
        "pillow>=10.4.0",
        "numpy>=1.24.0",
        "psutil>=5.9.8",
    ],

    # Optional dependencies for enhanced functionality
    extras_require={
        "qt": [
            "PyQt6>=6.6.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pytest-qt>=4.0.0",
            "PyQt6>=6.6.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
        ],
    },

    # Entry points for application launch
    entry_points=ENTRY_POINTS,

    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Multimedia :: Graphics :: Graphics Conversion",
        "Operating System :: OS Independent",
    ],

    keywords="pdf export bitmap pagination rotation a4 reportlab",

    # ZIP safety considerations
    zip_safe=False,
)
