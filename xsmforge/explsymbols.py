"""Global, local, parameter, type and field tables of the ExpL compiler."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


class SemanticError(Exception):
    """Raised when a program violates the language's declaration rules."""


@dataclass(eq=False)
class Field:
    """A field of a user-defined type."""

    name: str
    type: TypeEntry | None
    field_index: int = 0


@dataclass(eq=False)
class TypeEntry:
    """An entry of the type table."""

    name: str
    size: int = 0
    fields: list[Field] = field(default_factory=list)


@dataclass(eq=False)
class Param:
    """A formal parameter of a function."""

    name: str
    type: TypeEntry | None
    amp: int = 0


@dataclass(eq=False)
class GlobalSymbol:
    """A global variable, array or function."""

    name: str
    type: TypeEntry | None
    size: int
    binding: int
    paramlist: list[Param] | None = None
    flabel: int = 0


@dataclass(eq=False)
class LocalSymbol:
    """A local variable of a function."""

    name: str
    type: TypeEntry | None
    binding: int


@dataclass
class SymbolTables:
    """All symbol tables of one compilation."""

    total_count: int = 4096
    fbind: int = 0
    global_symbols: list[GlobalSymbol] = field(default_factory=list)
    local_symbols: list[LocalSymbol] = field(default_factory=list)
    params: list[Param] = field(default_factory=list)
    types: list[TypeEntry] = field(default_factory=list)
    fields: list[Field] = field(default_factory=list)

    def glookup(self, name: str) -> GlobalSymbol | None:
        return next((s for s in self.global_symbols if s.name == name), None)

    def ginstall(
        self,
        name: str,
        typ: TypeEntry | None,
        size: int,
        paramlist: list[Param] | None,
    ) -> GlobalSymbol:
        """Declare a global; a size of -1 marks a function."""
        if self.glookup(name) is not None:
            raise SemanticError(f'Variable re-initialized "{name}"')
        if size == -1:
            binding = self.fbind
            self.fbind += 1
        else:
            binding = self.total_count
            self.total_count += size
        symbol = GlobalSymbol(name, typ, size, binding, paramlist)
        self.global_symbols.append(symbol)
        return symbol

    def llookup(self, name: str) -> LocalSymbol | None:
        return next((s for s in self.local_symbols if s.name == name), None)

    def linstall(self, name: str, typ: TypeEntry | None) -> LocalSymbol:
        symbol = LocalSymbol(name, typ, self.total_count)
        self.total_count += 1
        self.local_symbols.append(symbol)
        return symbol

    def plookup(self, name: str) -> Param | None:
        return next((p for p in self.params if p.name == name), None)

    def pinstall(self, name: str, typ: TypeEntry | None) -> Param:
        param = Param(name, typ)
        self.params.append(param)
        return param

    def tlookup(self, name: str) -> TypeEntry | None:
        return next((t for t in self.types if t.name == name), None)

    def tinstall(
        self, name: str, size: int, fields: Iterable[Field] | None
    ) -> TypeEntry:
        """Declare a type; its size is the number of its fields.

        Fields typed as the placeholder type ``dummy`` refer to the type
        being declared and are pointed at it.
        """
        entry = TypeEntry(name)
        self.types.append(entry)
        members = list(fields or ())
        placeholder = self.tlookup("dummy")
        for index, member in enumerate(members):
            if member.type is placeholder:
                member.type = self.tlookup(name)
            member.field_index = index
        entry.fields = members
        entry.size = len(members)
        self.fields = []
        return entry

    def flookup(self, name: str, fields: Iterable[Field] | None) -> Field | None:
        return next((f for f in fields or () if f.name == name), None)

    def finstall(self, typ: TypeEntry | None, name: str) -> Field:
        """Add a field to the list of fields of the type being declared."""
        member = Field(name, typ)
        self.fields.append(member)
        return member

    def listing(self) -> str:
        """Render the global table, one symbol per line."""
        return "".join(
            f"{s.name}----{s.type.name if s.type else None}-----{s.binding}\n"
            for s in self.global_symbols
        )