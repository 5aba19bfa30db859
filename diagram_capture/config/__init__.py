"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Capture settings and environment configuration
- logging: Structured logging configuration
"""
