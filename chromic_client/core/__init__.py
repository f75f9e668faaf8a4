"""
Core Dispatch Logic
==================

Request normalization, backend selection and the two rendering backends.

Components:
- normalizer: Canonical (source, options) pairs and PDF/A input resolution
- dispatcher: Mode switch and output handling
- remote_client: HTTP client for the rendering service
- local_engine: Playwright and Ghostscript in-process engine
- errors: Exception hierarchy
"""
