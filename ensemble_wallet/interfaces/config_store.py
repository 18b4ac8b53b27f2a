"""Abstract base class defining the config store interface."""

from abc import ABC, abstractmethod

__all__ = ["BaseConfigStore"]


class BaseConfigStore(ABC):
    """Persists which wallet name is active across CLI invocations."""

    @abstractmethod
    def get_active_wallet(self) -> str | None:
        """Return the active wallet name, or None if unset."""
        raise NotImplementedError

    @abstractmethod
    def set_active_wallet(self, name: str) -> None:
        """Persist a new active wallet name."""
        raise NotImplementedError

    @abstractmethod
    def clear_active_wallet(self) -> None:
        """Remove the active wallet pointer. No-op when unset."""
        raise NotImplementedError
