"""Clipboard fallback chain.

Copying is attempted in order:
1. the system clipboard (pyperclip)
2. a legacy copier, e.g. the terminal's OSC 52 escape
3. a manual-copy presenter that shows the text for the user to copy

The chain never raises; the last step is always reached when the
automated ones fail. Without a dedicated presenter the text is printed
to the terminal with rich.

A legacy copier that cannot detect failure (Textual's OSC 52 escape is
written blind, and terminals that ignore it drop it silently) ends the
chain there. Leave it out when the terminal is known not to honour OSC 52
so the manual presenter is reached.
"""

from collections.abc import Callable
from enum import Enum

import pyperclip
from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from ..logger import get_logger

logger = get_logger(__name__)

Copier = Callable[[str], None]


class CopyMethod(str, Enum):
    SYSTEM = "system"
    LEGACY = "legacy"
    MANUAL = "manual"


def system_copy(text: str) -> None:
    """Write to the OS clipboard; raises if no clipboard mechanism exists."""
    pyperclip.copy(text)


def console_present(text: str) -> None:
    """Print the text between rules for the user to copy by hand."""
    console = Console()
    console.print(Rule("Copy the conversation below"))
    console.print(Text(text))
    console.print(Rule())


class ClipboardChain:
    """Ordered clipboard writers with a manual fallback."""

    def __init__(
        self,
        system: Copier | None = system_copy,
        legacy: Copier | None = None,
        manual: Copier | None = console_present,
    ):
        self.system = system
        self.legacy = legacy
        self.manual = manual

    def copy(self, text: str) -> CopyMethod:
        """Copy text, returning the method that handled it."""
        for method, copier in ((CopyMethod.SYSTEM, self.system), (CopyMethod.LEGACY, self.legacy)):
            if copier is None:
                continue
            try:
                copier(text)
                return method
            except Exception as e:
                logger.debug("Clipboard method failed", method=method.value, error=str(e))

        if self.manual is not None:
            try:
                self.manual(text)
            except Exception as e:
                logger.warning("Manual copy presenter failed", error=str(e))
        return CopyMethod.MANUAL
