"""
Data Models
===========

Pydantic models and typed mappings shared by the dispatcher and its backends.

Components:
- schemas: Sources, option sets, operations and render results
"""
