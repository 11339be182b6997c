import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text

from filepool.domain.interfaces.cache import CacheItemInterface
from filepool.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)


def _format_expiration(expiration: Optional[datetime]) -> str:
    if expiration is None:
        return "never"
    try:
        local = expiration.astimezone()
    except OverflowError:
        # Clamped expirations have no local-time equivalent
        local = expiration
    return local.strftime("%Y-%m-%d %H:%M:%S %Z")


def _hit_label(item: CacheItemInterface) -> str:
    return "[bold green]hit[/bold green]" if item.is_hit() else "[bold red]miss[/bold red]"


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        """Initializes the rich Console."""
        self._console = console or Console()

    @property
    def console(self):
        """Get the Rich console instance for direct operations."""
        return self._console

    @console.setter
    def console(self, console) -> None:
        self._console = console

    def display_item(self, item: CacheItemInterface) -> None:
        """Shows one item as a panel titled with its key.

        Args:
            item: The item returned by the pool.
        """
        expiration = getattr(item, "expiration", None)
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("status", _hit_label(item))
        table.add_row("expires", _format_expiration(expiration))
        if item.is_hit():
            table.add_row("value", Pretty(item.get()))

        panel = Panel(
            table,
            title=f"[bold white]{item.get_key()}[/bold white]",
            title_align="left",
            border_style="blue",
            box=ROUNDED,
            padding=(0, 1),
        )
        self.console.print(panel)

    def display_items(self, items: Sequence[CacheItemInterface]) -> None:
        """Shows stored items as a table, one row per key."""
        if not items:
            self.display_info("Cache is empty.")
            return

        table = Table(box=SIMPLE, border_style="cyan")
        table.add_column("Key", style="bold")
        table.add_column("Status")
        table.add_column("Expires")
        for item in items:
            table.add_row(
                item.get_key(),
                _hit_label(item),
                _format_expiration(getattr(item, "expiration", None)),
            )
        self.console.print(table)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)
