"""
Batch Module
============

Components:
- jobs: Built-in job table, job file loading and validation
- driver: Sequential capture of every job into one PNG each
- reporter: Human-readable progress and summary output
"""
