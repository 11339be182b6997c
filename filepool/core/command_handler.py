"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), runs them against the
cache pool and reports results through the UserInterface. Each handler
returns the process exit code.
"""

import json
import logging
from typing import List, Optional, Sequence, Tuple

from filepool.core.cache_item import CacheItem
from filepool.core.cache_pool import FileCachePool
from filepool.core.keys import validate_key
from filepool.domain.exceptions import InvalidKeyError
from filepool.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class CommandHandler:
    """Handles incoming commands and delegates to the cache pool."""

    def __init__(self, pool: FileCachePool, ui: UserInterface, default_ttl: Optional[int] = None):
        """Initializes the CommandHandler.

        Args:
            pool: The cache pool commands operate on.
            ui: Where results and errors are shown.
            default_ttl: Lifetime in seconds for stored values when no --ttl
                is given; None stores them without expiration.
        """
        self.pool = pool
        self.ui = ui
        self.default_ttl = default_ttl

    def handle_get(self, key: str) -> int:
        """Handles the 'get' command. Misses exit with EXIT_FAILURE."""
        logger.info(f"Handling 'get' command for key: {key}")
        try:
            item = self.pool.get_item(key)
        except InvalidKeyError as e:
            self.ui.display_error(str(e))
            return EXIT_USAGE

        self.ui.display_item(item)
        return EXIT_OK if item.is_hit() else EXIT_FAILURE

    def handle_set(self, key: str, raw_value: str, ttl: Optional[int] = None, as_json: bool = False) -> int:
        """Handles the 'set' command, saving the value immediately."""
        logger.info(f"Handling 'set' command for key: {key}")
        try:
            item = self._build_item(key, raw_value, ttl, as_json)
            saved = self.pool.save(item)
        except (InvalidKeyError, ValueError) as e:
            self.ui.display_error(str(e))
            return EXIT_USAGE

        if not saved:
            self.ui.display_error(f"Failed to store key '{key}'.")
            return EXIT_FAILURE
        self.ui.display_info(f"Stored '{key}'.")
        return EXIT_OK

    def handle_set_many(self, pairs: Sequence[str], ttl: Optional[int] = None, as_json: bool = False) -> int:
        """Handles the 'set-many' command: queues KEY=VALUE pairs and commits them together."""
        logger.info(f"Handling 'set-many' command for {len(pairs)} pair(s)")
        try:
            items = [
                self._build_item(key, raw_value, ttl, as_json)
                for key, raw_value in self._split_pairs(pairs)
            ]
        except (InvalidKeyError, ValueError) as e:
            self.ui.display_error(str(e))
            return EXIT_USAGE

        for item in items:
            self.pool.save_deferred(item)

        if not self.pool.commit():
            self.ui.display_error("Failed to store every value; the batch was only partly written.")
            return EXIT_FAILURE
        self.ui.display_info(f"Stored {len(pairs)} value(s).")
        return EXIT_OK

    def handle_has(self, key: str) -> int:
        """Handles the 'has' command (storage existence, expiry not checked)."""
        try:
            present = self.pool.has_item(key)
        except InvalidKeyError as e:
            self.ui.display_error(str(e))
            return EXIT_USAGE

        if present:
            self.ui.display_info(f"'{key}' is present.")
            return EXIT_OK
        self.ui.display_info(f"'{key}' is not present.")
        return EXIT_FAILURE

    def handle_delete(self, keys: Sequence[str]) -> int:
        """Handles the 'delete' command; stops at the first key that cannot be removed."""
        logger.info(f"Handling 'delete' command for keys: {list(keys)}")
        try:
            deleted = self.pool.delete_items(keys)
        except InvalidKeyError as e:
            self.ui.display_error(str(e))
            return EXIT_USAGE

        if not deleted:
            self.ui.display_error("Failed to delete every requested key.")
            return EXIT_FAILURE
        self.ui.display_info(f"Deleted {len(keys)} key(s).")
        return EXIT_OK

    def handle_clear(self) -> int:
        """Handles the 'clear' command."""
        logger.info("Handling 'clear' command")
        if not self.pool.clear():
            self.ui.display_error("Failed to clear the cache.")
            return EXIT_FAILURE
        self.ui.display_info("Cache cleared.")
        return EXIT_OK

    def handle_list(self) -> int:
        """Handles the 'list' command, showing every stored key.

        Stored items that load as misses (expired or unreadable) are counted
        in a warning after the listing.
        """
        try:
            keys = self.pool.keys()
        except OSError as e:
            self.ui.display_error(f"Failed to list the cache: {e}")
            return EXIT_FAILURE

        items = list(self.pool.get_items(keys).values())
        self.ui.display_items(items)
        misses = sum(1 for item in items if not item.is_hit())
        if misses:
            self.ui.display_warning(f"{misses} stored item(s) are expired or unreadable.")
        return EXIT_OK

    def _build_item(self, key: str, raw_value: str, ttl: Optional[int], as_json: bool) -> CacheItem:
        if as_json:
            try:
                value = json.loads(raw_value)
            except json.JSONDecodeError as e:
                raise ValueError(f"Value for '{key}' is not valid JSON: {e}") from e
        else:
            value = raw_value

        item = CacheItem(validate_key(key)).set(value)
        lifetime = ttl if ttl is not None else self.default_ttl
        return item.expires_after(lifetime)

    @staticmethod
    def _split_pairs(pairs: Sequence[str]) -> List[Tuple[str, str]]:
        split = []
        for pair in pairs:
            key, sep, value = pair.partition("=")
            if not sep:
                raise ValueError(f"Expected KEY=VALUE, got '{pair}'")
            split.append((key, value))
        return split
