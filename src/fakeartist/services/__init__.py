"""Service layer for fakeartist."""

from fakeartist.services.session import GameSession

__all__ = ["GameSession"]
