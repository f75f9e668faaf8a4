"""
Test Suite
==========

Test suite matching the chromic_client package structure.

Test Categories:
- unit: Unit tests for individual components
"""
