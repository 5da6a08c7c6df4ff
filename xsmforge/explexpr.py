"""Code generation for ExpL expressions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from xsmforge.explsymbols import Field, SymbolTables
from xsmforge.expltree import ASTNode, NodeKind

# The highest register number the generator may hand out.
MAX_REGISTER = 16


class CodegenError(Exception):
    """Raised when code cannot be generated for a tree."""


_BINARY: dict[int, str] = {
    NodeKind.LE: "LE",
    NodeKind.GE: "GE",
    NodeKind.LT: "LT",
    NodeKind.GT: "GT",
    NodeKind.DEQ: "EQ",
    NodeKind.NEQ: "NE",
    NodeKind.PLUS: "ADD",
    NodeKind.MINUS: "SUB",
    NodeKind.MUL: "MUL",
    NodeKind.DIV: "DIV",
    NodeKind.MOD: "MOD",
}


@dataclass
class ExplExpressionGenerator:
    """Emits code that evaluates ExpL expressions into registers.

    ``counter`` is the highest register in use (-1 when none is).  Setting
    ``isamp`` asks the next identifier for its address instead of its value;
    ``fld`` does the same for the next field or array access.
    """

    symbols: SymbolTables = field(default_factory=SymbolTables)
    counter: int = -1
    label: int = 3
    fld: bool = False
    isamp: bool = False
    _out: list[str] = field(default_factory=list)

    def text(self) -> str:
        """Return all code generated so far."""
        return "".join(self._out)

    def _emit(self, *lines: str) -> None:
        self._out.extend(f"{line}\n" for line in lines)

    def _getreg(self) -> int:
        if self.counter >= MAX_REGISTER:
            raise CodegenError("Running out of registers")
        self.counter += 1
        return self.counter

    def _freereg(self) -> None:
        if self.counter >= 0:
            self.counter -= 1

    def _freeallreg(self) -> None:
        self.counter = -1

    def _getlabel(self) -> int:
        self.label += 1
        return self.label

    def _local_offset(self, name: str | None) -> int | None:
        return next(
            (i for i, s in enumerate(self.symbols.local_symbols) if s.name == name),
            None,
        )

    def _param_offset(self, name: str | None) -> int | None:
        return next(
            (i for i, p in enumerate(self.symbols.params) if p.name == name), None
        )

    def _global_binding(self, node: ASTNode) -> int:
        if node.gentry is None:
            raise CodegenError(f"undeclared identifier {node.name}")
        return node.gentry.binding

    def _local_slot(self, r1: int, offset: int) -> int:
        """Put the address BP+offset+1 in a new register and return it."""
        r2 = self._getreg()
        self._emit(f"MOV R{r2},BP", f"MOV R{r1},{offset + 1}", f"ADD R{r2},R{r1}")
        return r2

    def _param_slot(self, offset: int) -> int:
        """Put the address BP-2-(offset+1) in a new register and return it."""
        r2 = self._getreg()
        self._emit(f"MOV R{r2},BP")
        r3 = self._getreg()
        self._emit(
            f"MOV R{r3},2",
            f"SUB R{r2},R{r3}",
            f"MOV R{r3},{offset + 1}",
            f"SUB R{r2},R{r3}",
        )
        self._freereg()
        return r2

    def generate(self, root: ASTNode | None) -> int:
        """Generate code for ``root`` and return the register holding its value."""
        if root is None:
            return 0
        kind = root.nodetype
        if kind in _BINARY:
            r1 = self.generate(root.ptr1)
            r2 = self.generate(root.ptr2)
            self._emit(f"{_BINARY[kind]} R{r1},R{r2}")
            self._freereg()
            return r1
        if kind == NodeKind.AND:
            return self._short_circuit(root, "JZ", "MUL")
        if kind == NodeKind.OR:
            return self._short_circuit(root, "JNZ", "ADD")
        if kind == NodeKind.NOT:
            return self._not(root)
        if kind == NodeKind.ID:
            return self._identifier(root)
        if kind == NodeKind.FIELD:
            return self._field(root)
        if kind == NodeKind.ARRAY:
            return self._array(root)
        if kind == NodeKind.NUM:
            r1 = self._getreg()
            self._emit(f"MOV R{r1},{root.value}")
            return r1
        if kind == NodeKind.STRVAL:
            r1 = self._getreg()
            self._emit(f'MOV R{r1},"{root.name}"')
            return r1
        if kind == NodeKind.NILL:
            r1 = self._getreg()
            self._emit(f"MOV R{r1},-1")
            return r1
        raise CodegenError(f"NODETYPE is {kind}: Unknown node Type")

    def _short_circuit(self, root: ASTNode, jump: str, combine: str) -> int:
        r1 = self.generate(root.ptr1)
        r2 = self._getreg()
        self._emit(f"MOV R{r2},1")
        l1 = self._getlabel()
        self._emit(f"{jump} R{r1},L{l1}")
        r3 = self.generate(root.ptr2)
        self._emit(f"MOV R{r2},R{r3}")
        self._freereg()
        self._emit(f"L{l1}:", f"{combine} R{r1},R{r2}")
        self._freereg()
        return r1

    def _not(self, root: ASTNode) -> int:
        r1 = self.generate(root.ptr2)
        l1 = self._getlabel()
        self._emit(f"JNZ R{r1},L{l1}", f"MOV R{r1},1")
        l2 = self._getlabel()
        self._emit(f"JMP L{l2}", f"L{l1}:", f"MOV R{r1},0", f"L{l2}:")
        return r1

    def _identifier(self, node: ASTNode) -> int:
        r1 = self._getreg()
        local = self._local_offset(node.name)
        if local is not None:
            r2 = self._local_slot(r1, local)
            if self.isamp:
                self._emit(f"MOV R{r1},R{r2}")
                self.isamp = False
            else:
                self._emit(f"MOV R{r1},[R{r2}]")
                if self.fld:
                    self._emit(f"MOV R{r1},R{r2}")
                    self.fld = False
            self._freereg()
            return r1
        param = self._param_offset(node.name)
        if param is not None:
            r2 = self._param_slot(param)
            self._emit(f"MOV R{r1},[R{r2}]")
            self.isamp = False
            self.fld = False
            self._freereg()
            return r1
        binding = self._global_binding(node)
        if self.isamp:
            self._emit(f"MOV R{r1},{binding}")
            self.isamp = False
        else:
            self._emit(f"MOV R{r1},[{binding}]")
            if self.fld:
                self._emit(f"MOV R{r1},{binding}")
                self.fld = False
        return r1

    def _field(self, node: ASTNode) -> int:
        r1 = self._getreg()
        local = self._local_offset(node.name)
        param = self._param_offset(node.name) if local is None else None
        if local is not None:
            r2 = self._local_slot(r1, local)
            self._emit(f"MOV R{r1},[R{r2}]")
            self._freereg()
            typ = self.symbols.local_symbols[local].type
        elif param is not None:
            r2 = self._param_slot(param)
            self._emit(f"MOV R{r1},[R{r2}]")
            self._freereg()
            typ = self.symbols.params[param].type
        else:
            binding = self._global_binding(node)
            self._emit(f"MOV R{r1},[{binding}]")
            r2 = r1
            typ = node.gentry.type
        fields = typ.fields if typ is not None else []
        r2 = self._walk_fields(node, r1, r2, fields)
        if self.fld:
            self._emit(f"MOV R{r1},R{r2}")
            self.fld = False
        return r1

    def _walk_fields(
        self, node: ASTNode, r1: int, r2: int, fields: Sequence[Field]
    ) -> int:
        """Follow the chain of field names, each looked up in ``fields``."""
        current = node
        while current.ptr2 is not None:
            wanted = current.ptr2.name
            index = next(
                (i for i, member in enumerate(fields, 1) if member.name == wanted),
                None,
            )
            if index is not None:
                r2 = self._getreg()
                self._emit(f"MOV R{r2},{index}", f"ADD R{r2},R{r1}", f"MOV R{r1},[R{r2}]")
                self._freereg()
            current = current.ptr2
        return r2

    def _array(self, node: ASTNode) -> int:
        if node.ptr1 is None:
            raise CodegenError("array access without an array")
        saved = self.fld
        self.fld = False
        offset = self.generate(node.ptr2)
        self.fld = saved
        r1 = self._getreg()
        self._emit(
            f"MOV R{r1},{self._global_binding(node.ptr1)}",
            f"ADD R{r1},R{offset}",
            f"MOV R{offset},[R{r1}]",
        )
        if self.fld:
            self._emit(f"MOV R{offset},R{r1}")
            self.fld = False
        self._freereg()
        return offset