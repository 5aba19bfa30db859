"""
Core Business Logic
==================

Modules:
- rendering: Browser session management and PNG output
- batch: Job table, sequential capture driver and console reporting
"""
