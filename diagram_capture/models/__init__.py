"""
Data Models
===========

Pydantic models for diagram jobs, per-job outcomes and batch summaries.
"""
