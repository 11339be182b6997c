"""Interface for presenting cache operations to the user.

Allows different UI implementations (rich console, plain logging) behind
the command handler.
"""

import abc
from typing import Any, Sequence

from filepool.domain.interfaces.cache import CacheItemInterface


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_item(self, item: CacheItemInterface) -> None:
        """Displays a single cache item (key, hit state, expiration, value)."""
        pass

    @abc.abstractmethod
    def display_items(self, items: Sequence[CacheItemInterface]) -> None:
        """Displays a listing of cache items."""
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass
