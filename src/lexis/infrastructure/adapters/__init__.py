# Infrastructure Adapters Package
from .memory_store import InMemoryReviewStateStore

__all__ = ["InMemoryReviewStateStore"]
