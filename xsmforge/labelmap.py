"""Map from assembly labels to code addresses."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LabelMap:
    """Labels in the order they were found, with their addresses."""

    entries: list[tuple[str, int]] = field(default_factory=list)

    def append(self, label: str, addr: int) -> None:
        """Record that ``label`` stands at ``addr``."""
        self.entries.append((label, addr))

    def find(self, name: str) -> int:
        """Return the address of the first label called ``name``, or -1."""
        return next((addr for label, addr in self.entries if label == name), -1)

    def listing(self) -> str:
        """Render the map as ``name : address`` lines."""
        return "".join(f"{label} : {addr}\n" for label, addr in self.entries)