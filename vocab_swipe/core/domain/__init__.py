# vocab_swipe/core/domain/__init__.py
