# vocab_swipe/core/domain/exceptions.py
from typing import Optional


class DomainError(Exception):
    """Base class for all domain-level exceptions."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Entity Not Found Errors ---

class SourceNotFoundError(DomainError):
    """Raised when a requested vocabulary source does not exist."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Source '{name}' not found.")

# --- Loading Errors ---

class SourceLoadError(DomainError):
    """Raised when the source backend is unreachable or a source's content cannot be parsed."""
    def __init__(self, reason: str, name: Optional[str] = None):
        self.name = name
        self.reason = reason
        if name:
            super().__init__(f"Could not load source '{name}': {reason}")
        else:
            super().__init__(f"Could not load sources: {reason}")

# --- Validation Errors ---

class ValidationError(DomainError):
    """Raised when a caller-supplied source name or word list is malformed."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid word list: {reason}")

# --- Session State Errors ---

class NoActiveSourceError(DomainError):
    """Raised when a study action is requested before any source was selected."""
    def __init__(self):
        super().__init__("No source is selected for this session.")

# --- Warnings ---

class PersistenceWarning(UserWarning):
    """
    A durable write of progress failed.
    Logged and emitted through `warnings`; never raised to callers.
    """
