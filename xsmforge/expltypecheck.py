"""Semantic checks of the ExpL compiler and the program prologue."""

from __future__ import annotations

from dataclasses import dataclass, field

from xsmforge.explsymbols import SemanticError, SymbolTables, TypeEntry
from xsmforge.expltree import ASTNode

# Operators whose operands may not be strings.
_ARITHMETIC: dict[str, str] = {
    "+": "PLUS",
    "-": "MINUS",
    "*": "MUL",
    "/": "DIV",
    "%": "MOD",
    "<": "LT",
    ">": "GT",
    "#": "LE",
    "$": "GE",
}

# Operators whose operand types must be identical.
_EQUAL: dict[str, str] = {
    "r": "return type do not match with the function return type",
    "i": "Expected boolean , Found value in if",
    "e": "Expected boolean , Found value in if else",
    "w": "Expected boolean , Found value in while",
    "a": "conflict in assignment types",
    "d": "conflict in operand types in DEQ",
    "n": "conflict in operand types in NEQ",
}


@dataclass
class TypeChecker:
    """Checks declarations and expressions against the symbol tables."""

    symbols: SymbolTables = field(default_factory=SymbolTables)

    def _type(self, name: str) -> TypeEntry | None:
        return self.symbols.tlookup(name)

    def _is_scalar(self, typ: TypeEntry | None) -> bool:
        return typ is self._type("integer") or typ is self._type("string")

    @staticmethod
    def _udt_error(fr: bool, al: bool, fd: bool) -> SemanticError:
        if fr:
            return SemanticError("cannot free a non udt")
        if al:
            return SemanticError("cannot ALLOC a non udt")
        if fd:
            return SemanticError(
                " . operation over integer/string type is not allowed"
            )
        return SemanticError("cannot assign null to non-udt")

    def _attach_field(self, node: ASTNode, node2: ASTNode | None) -> None:
        if node2 is None:
            raise SemanticError("Un-declared field variable")
        fields = node.type.fields if node.type is not None else None
        member = self.symbols.flookup(node2.name, fields)
        if member is None:
            raise SemanticError("Un-declared field variable")
        node2.type = member.type
        node.ptr2 = node2

    def verify(
        self,
        node: ASTNode,
        g: bool,
        l: bool,
        a: bool,
        t: TypeEntry | None,
    ) -> bool:
        """Check that a new declaration neither clashes nor uses a bad type."""
        if l and self.symbols.llookup(node.name) is not None:
            raise SemanticError("Re initialization of variable")
        if a and self.symbols.plookup(node.name) is not None:
            raise SemanticError("Re initialization of variable in paramlist")
        if g and self.symbols.glookup(node.name) is not None:
            raise SemanticError("Re initialization of identifier")
        if t is not None and t is not self._type("integer"):
            raise SemanticError("arrays of udt and strings are not allowed")
        return True

    def install_id(self, node: ASTNode, node2: ASTNode, t: TypeEntry | None):
        """Declare a global array whose length is the value of ``node2``."""
        if t is self._type("integer"):
            array_type = self._type("array_integer")
        elif t is self._type("string"):
            array_type = self._type("array_string")
        else:
            raise SemanticError("arrays of udt is not allowed")
        return self.symbols.ginstall(node.name, array_type, node2.value, None)

    def type_comp(
        self, t1: TypeEntry | None, t2: TypeEntry | None, c: str
    ) -> bool:
        """Check the operand types of operator ``c``.

        For ``c == ' '`` the result tells whether the types are equal; for
        every other operator a mismatch raises SemanticError.
        """
        if c == " ":
            return t1 is t2
        if c in _EQUAL:
            if t1 is not t2:
                raise SemanticError(_EQUAL[c])
            return True
        string = self._type("string")
        if c in _ARITHMETIC:
            if t1 is string or t2 is string:
                raise SemanticError(f"conflict in operand types in {_ARITHMETIC[c]}")
            return True
        boolean = self._type("boolean")
        if c in ("&", "|"):
            if not (t1 is boolean and t2 is boolean):
                name = "AND" if c == "&" else "OR"
                raise SemanticError(f"conflict in operand types in {name}")
            return True
        if c == "!":
            if t1 is not boolean:
                raise SemanticError("conflict in operand types in NOT")
            return True
        if c == "=":
            if self._is_scalar(t1):
                raise SemanticError("conflict in operand types in DEQNILL")
            return True
        if c == "^":
            if self._is_scalar(t1):
                raise SemanticError("conflict in operand types in NEQNILL")
            # The comparison with null goes on to the system-call check.
            return self._check_exposcall(t1, t2)
        if c == "x":
            return self._check_exposcall(t1, t2)
        return True

    def _check_exposcall(
        self, t1: TypeEntry | None, t2: TypeEntry | None
    ) -> bool:
        string = self._type("string")
        if t2 is not None:
            if t2 is not string:
                raise SemanticError("invalid fun_code type in exposcall")
        elif t1 is string:
            raise SemanticError("invalid return type to exposcall")
        return True

    def type_assign(
        self,
        node: ASTNode,
        node2: ASTNode | None,
        udt: bool,
        fr: bool,
        al: bool,
        fd: bool,
        rd: bool,
    ) -> bool:
        """Give an identifier node the type of the symbol it names.

        ``udt`` demands a user-defined type; ``fr``, ``al`` and ``fd`` mark a
        free, an alloc and a field access, and ``rd`` a read target.  For a
        field access ``node2`` is the field node hung below ``node``.
        """
        local = self.symbols.llookup(node.name)
        if local is not None:
            if udt and self._is_scalar(local.type):
                raise self._udt_error(fr, al, fd)
            node.type = local.type
            if fd:
                self._attach_field(node, node2)
            return True

        param = self.symbols.plookup(node.name)
        if param is not None:
            if not rd:
                if udt and self._is_scalar(param.type):
                    raise self._udt_error(fr, al, fd)
                node.type = param.type
                if fd:
                    self._attach_field(node, node2)
            elif param.type is self._type("integer"):
                node.type = self._type("integer")
            elif param.type is self._type("string"):
                node.type = self._type("string")
            return True

        symbol = self.symbols.glookup(node.name)
        if symbol is None:
            raise SemanticError(f"Un-declared variable {node.name}")
        if not rd and symbol.type in (
            self._type("array_integer"),
            self._type("array_string"),
        ):
            if fd:
                raise SemanticError(
                    f" . operation over arrays not allowed {node.name}"
                )
            raise SemanticError(
                "conflict in ID NodeType : Expected Variable . Found Array "
                f"{node.name}"
            )
        if udt and self._is_scalar(symbol.type):
            raise self._udt_error(fr, al, fd)
        if not fr:
            node.gentry = symbol
        node.type = symbol.type
        if fd:
            self._attach_field(node, node2)
        return True

    def type_assign_arr(
        self, node: ASTNode, node2: ASTNode | None, func: bool
    ) -> bool:
        """Type an array access or, when ``func`` is set, a function call.

        Returns False for a function and True for an array element.
        """
        symbol = self.symbols.glookup(node.name)
        if symbol is None:
            raise SemanticError(f"Un-declared identifier {node.name}")
        if func:
            if symbol.size != -1:
                raise SemanticError(
                    f"conflict in ID NodeType : Expected Function {node.name}"
                )
            node.gentry = symbol
            node.type = symbol.type
            return False
        if self._is_scalar(symbol.type):
            raise SemanticError(
                "conflict in ID NodeType : Expected Variable , Found Array "
                f"{node.name}"
            )
        if node2 is None or node2.type is not self._type("integer"):
            raise SemanticError(f"Expected value {node.name}")
        node.gentry = symbol
        if symbol.type is self._type("array_integer"):
            node.type = self._type("integer")
        elif symbol.type is self._type("array_string"):
            node.type = self._type("string")
        return True


def prologue(total_count: int = 4096) -> str:
    """Return the header and start-up code of a compiled program.

    ``total_count`` is the first free address after the globals.
    """
    lines = [
        "0",
        "2056",
        "0",
        "0",
        "0",
        "0",
        "0",
        "0",
        f"MOV SP,{total_count - 1}",
        f"MOV BP,{total_count}",
        "PUSH R0",
        "CALL MAIN",
        "INT 10",
    ]
    return "".join(f"{line}\n" for line in lines)


def get_last(head: ASTNode) -> ASTNode:
    """Return the last node of a chain linked through ``ptr2``."""
    while head.ptr2 is not None:
        head = head.ptr2
    return head