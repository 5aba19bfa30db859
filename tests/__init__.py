"""
Test Suite
==========

Test suite matching the diagram_capture/ package structure.

Test Categories:
- unit: Unit tests for individual components, with Playwright faked out
"""
