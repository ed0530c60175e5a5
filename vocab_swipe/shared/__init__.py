# vocab_swipe/shared/__init__.py
"""
Shared utilities package.

Cross-cutting concerns used by both the Core Domain and the Adapters:
- Configuration management
- Structured logging
- Distributed tracing
- Resilience patterns (Circuit Breakers, Retries)
- Dependency Injection wiring
"""
