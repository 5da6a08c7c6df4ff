"""Symbolic constants and register aliases of the SPL compiler."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from xsmforge.splnodes import Node, NodeType

CONSTANTS_FILE = "splconstants.cfg"
CONSTANT_NAME_MAX_LEN = 30


class SplError(Exception):
    """Raised for invalid declarations or uses of SPL identifiers."""


@dataclass(eq=False)
class Alias:
    """A name bound to a register within a block."""

    name: str
    reg: int
    depth: int


@dataclass
class SymbolTable:
    """Constants and aliases visible while compiling an SPL program.

    ``depth`` is the nesting level of the block being compiled and ``line``
    the source line used in error messages; the parser keeps both current.
    """

    depth: int = 0
    line: int = 0
    constants: dict[str, int] = field(default_factory=dict)
    aliases: list[Alias] = field(default_factory=list)

    def lookup_constant(self, name: str) -> int | None:
        """Return the value of a constant, or None if it is not defined."""
        return self.constants.get(name)

    def lookup_alias(self, name: str) -> Alias | None:
        """Return the innermost alias called ``name``."""
        return next((a for a in reversed(self.aliases) if a.name == name), None)

    def lookup_alias_reg(self, reg: int) -> Alias | None:
        """Return the innermost alias bound to register ``reg``."""
        return next((a for a in reversed(self.aliases) if a.reg == reg), None)

    def push_alias(self, name: str, reg: int) -> Alias:
        """Bind ``name`` to ``reg`` in the current block.

        A register already aliased in the current block is renamed instead
        of getting a second alias.
        """
        if name in self.constants:
            raise SplError(
                f"{self.line}: Alias name {name} already used as symbolic constant!!"
            )
        existing = self.lookup_alias(name)
        if existing is not None and existing.depth == self.depth:
            raise SplError(
                f"{self.line}: Alias name {name} already used in the current block!!"
            )
        same_reg = self.lookup_alias_reg(reg)
        if same_reg is not None and same_reg.depth == self.depth:
            same_reg.name = name
            return same_reg
        alias = Alias(name, reg, self.depth)
        self.aliases.append(alias)
        return alias

    def pop_alias(self) -> None:
        """Drop every alias declared in the current block."""
        while self.aliases and self.aliases[-1].depth == self.depth:
            self.aliases.pop()

    def insert_constant(self, name: str, value: int) -> None:
        """Define a constant; defining it twice is an error."""
        if name in self.constants:
            raise SplError(
                f"{self.line}: Multiple Definitions for constant {name}!!"
            )
        self.constants[name] = value

    def load_constants(self, path: str | os.PathLike[str] = CONSTANTS_FILE) -> None:
        """Read ``name value`` pairs from a file, stopping at the first bad pair."""
        try:
            with open(path, encoding="utf-8") as handle:
                tokens = handle.read().split()
        except OSError as exc:
            raise SplError(f"Unable to open {os.fspath(path)} file!") from exc
        for name, raw in zip(tokens[::2], tokens[1::2]):
            try:
                value = int(raw)
            except ValueError:
                break
            self.insert_constant(name, value)

    def substitute_id(self, node: Node) -> Node:
        """Turn an identifier node into a number or register node."""
        name = node.name
        if name is not None and name in self.constants:
            node.nodetype = NodeType.NUM
            node.name = None
            node.value = self.constants[name]
            return node
        alias = self.lookup_alias(name) if name is not None else None
        if alias is None:
            raise SplError(f"{self.line}: Unknown identifier {name} used!!")
        node.nodetype = NodeType.REG
        node.name = None
        node.value = alias.reg
        return node