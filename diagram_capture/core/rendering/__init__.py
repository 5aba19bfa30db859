"""
Rendering Module
===============

Browser automation and PNG file output.

Components:
- session: One Playwright browser and page reused across jobs
- image_writer: PNG validation, optional optimization and atomic writes
"""
