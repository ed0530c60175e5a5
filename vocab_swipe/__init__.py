# vocab_swipe/__init__.py
"""
Vocab Swipe - vocabulary flashcard engine and HTTP service.

This package follows Hexagonal Architecture (Ports & Adapters):
the selection/progress engine lives in `core`, storage and transport
live in `adapters`, cross-cutting concerns live in `shared`.
"""

__version__ = "1.0.0"
