# tests/__init__.py
"""
Test Suite for Vocab Swipe.

Organization:
- `core`: domain models and use cases against a temp folder and an in-memory state store.
- `adapters`: file codec, repositories, state stores, event bus and the HTTP API.
- `test_manage_cli.py`: the operator CLI.
"""
