from abc import ABC, abstractmethod

from app.config.models import SessionConfig


class BaseConfigStore(ABC):
    """Contract for persisting the session configuration."""

    @abstractmethod
    def load(self) -> SessionConfig:
        """Return the saved configuration, or an empty one if nothing is saved.

        Raises:
            ConfigStoreError: if the backing store cannot be read.
        """

    @abstractmethod
    def save(self, config: SessionConfig) -> None:
        """Overwrite the saved configuration.

        Raises:
            ConfigStoreError: if the backing store cannot be written.
        """
