# vocab_swipe/adapters/__init__.py
"""
Infrastructure Adapters.

Concrete implementations of the Core Ports: storage backends,
the in-process event bus and the HTTP API.
"""
