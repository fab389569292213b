"""Public schema exports."""

from .auth import TextMessage

__all__ = ["TextMessage"]
