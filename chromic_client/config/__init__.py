"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Backend mode, service URL, timeouts and engine executables
- logging: Structured logging configuration
"""
