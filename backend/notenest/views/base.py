"""
NoteNest — View Controller Base
=================================

What:  Common shape of the per-page view-state controllers.
Why:   AppContext swaps views on navigation; each view needs a hook to start
       page-scoped work and one to tear it down.
How:   mount() runs when the page becomes current, close() when it is left.
       Views are thrown away after close(), so all their state resets.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar


class View(ABC):
    """A page-scoped state holder. Subclasses set `name` and implement page()."""

    name: ClassVar[str] = ""

    def __init__(self) -> None:
        self.mounted = False

    async def mount(self) -> None:
        self.mounted = True

    def close(self) -> None:
        self.mounted = False

    @abstractmethod
    def page(self) -> Any:
        """Serializable model of the page as it should render now."""
        ...
