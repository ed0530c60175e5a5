# vocab_swipe/adapters/api/__init__.py
"""
HTTP Adapter (FastAPI).

Exposes the sources CRUD surface and the study session endpoints.
"""
