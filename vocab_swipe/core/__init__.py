# vocab_swipe/core/__init__.py
"""
Core Domain Layer.

Pure business logic of the flashcard engine:
- No dependencies on web frameworks.
- No dependencies on infrastructure (FileSystem, HTTP).
- Defines Interfaces (Ports) that the Adapters must implement.
"""
