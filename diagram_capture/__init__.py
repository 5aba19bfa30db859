"""
Diagram Capture
===============

Headless-browser capture of locally rendered diagrams into PNG images.

This package provides:
- A rendering session wrapping one Playwright browser and page
- A sequential batch driver over an explicit job table
- Atomic, validated PNG output
- A console entry point (``diagram-capture`` / ``python -m diagram_capture``)
"""

__version__ = "1.0.0"
__author__ = "Diagram Capture Team"
