# vocab_swipe/adapters/api/routers/__init__.py
