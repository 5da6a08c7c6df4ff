"""Label bookkeeping for SPL code generation."""

from __future__ import annotations

from dataclasses import dataclass, field


class LabelError(Exception):
    """Raised for redeclared labels or loop control outside a loop."""


@dataclass(eq=False)
class Label:
    """A named position in the generated code."""

    name: str


@dataclass
class LabelTable:
    """Declared labels, generated label names and the stack of open loops."""

    _next_id: int = 1
    _labels: dict[str, Label] = field(default_factory=dict)
    _loops: list[tuple[Label, Label]] = field(default_factory=list)

    def create(self) -> Label:
        """Return a fresh, unregistered label with a generated name."""
        label = Label(f"_L{self._next_id}")
        self._next_id += 1
        return label

    def add(self, name: str, line: int = 0) -> Label:
        """Declare a named label; redeclaration is an error."""
        if name in self._labels:
            raise LabelError(f"{line}: Label '{name}' redeclared.")
        label = Label(name)
        self._labels[name] = label
        return label

    def get(self, name: str) -> Label | None:
        """Return the declared label called ``name``, if any."""
        return self._labels.get(name)

    def push_while(self, start: Label, end: Label) -> None:
        """Enter a loop whose start and end labels are given."""
        self._loops.append((start, end))

    def pop_while(self) -> None:
        """Leave the innermost loop."""
        if not self._loops:
            raise LabelError("no enclosing while loop")
        self._loops.pop()

    def while_end(self) -> Label:
        """Return the end label of the innermost loop."""
        if not self._loops:
            raise LabelError("break outside of a while loop")
        return self._loops[-1][1]

    def while_start(self) -> Label:
        """Return the start label of the innermost loop."""
        if not self._loops:
            raise LabelError("continue outside of a while loop")
        return self._loops[-1][0]