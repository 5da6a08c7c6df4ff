"""Code generation for SPL expressions."""

from __future__ import annotations

from dataclasses import dataclass, field

from xsmforge.splnodes import C_REG_BASE, Node, NodeType, register_name
from xsmforge.splsymbols import SplError

# Expressions may hold at most this many compiler registers at once.
MAX_EXPR_REGISTERS = 5


class RegisterOverflowError(SplError):
    """Raised when an expression needs too many scratch registers."""


# operator -> (instruction, instruction with operands swapped or None, has an
# immediate-number form)
_BINARY: dict[int, tuple[str, str | None, bool]] = {
    NodeType.LT: ("LT", "GT", False),
    NodeType.GT: ("GT", "LT", False),
    NodeType.EQ: ("EQ", "EQ", False),
    NodeType.LE: ("LE", "GE", False),
    NodeType.GE: ("GE", "LE", False),
    NodeType.NE: ("NE", "NE", False),
    NodeType.AND: ("MUL", "MUL", False),
    NodeType.OR: ("ADD", "ADD", False),
    NodeType.ADD: ("ADD", "ADD", True),
    NodeType.SUB: ("SUB", None, True),
    NodeType.MUL: ("MUL", "MUL", True),
    NodeType.DIV: ("DIV", None, True),
    NodeType.MOD: ("MOD", None, True),
}


@dataclass
class ExpressionGenerator:
    """Emits machine code that leaves an expression's value in a scratch register.

    ``regcount`` is the number of scratch registers in use; the result of
    the last expression is in register ``C_REG_BASE + regcount - 1``.
    ``out_linecount`` counts the instruction lines written.
    """

    regcount: int = 0
    out_linecount: int = 0
    _out: list[str] = field(default_factory=list)

    def text(self) -> str:
        """Return all code generated so far."""
        return "".join(self._out)

    def _emit(self, *lines: str) -> None:
        self.out_linecount += len(lines)
        self._out.extend(f"{line}\n" for line in lines)

    def _emit_label(self, name: str) -> None:
        self._out.append(f"{name}:\n")

    def _claim(self) -> int:
        reg = C_REG_BASE + self.regcount
        self.regcount += 1
        if self.regcount == MAX_EXPR_REGISTERS:
            raise RegisterOverflowError(
                "Register Overflow. Please reduce size of your expression."
            )
        return reg

    def _top(self, depth: int = 1) -> int:
        return C_REG_BASE + self.regcount - depth

    def generate_expression(self, root: Node | None) -> None:
        """Generate code for an expression tree."""
        if root is None:
            return
        kind = root.nodetype
        if kind in _BINARY:
            self._binary(root, *_BINARY[kind])
        elif kind == NodeType.NOT:
            self._not(root)
        elif kind == NodeType.ADDR_EXPR:
            self.generate_expression(root.ptr1)
            top = self._top()
            self._emit(f"MOV R{top}, [R{top}]")
        elif kind == NodeType.NUM:
            reg = self._claim()
            self._emit(f"MOV R{reg}, {root.value}")
        elif kind == NodeType.STRING:
            reg = self._claim()
            self._emit(f"MOV R{reg}, {root.name}")
        elif kind == NodeType.REG:
            reg = self._claim()
            self._emit(f"MOV R{reg}, {register_name(root.value)}")
        else:
            raise SplError(f"Unknown Command {root.nodetype} {root.name}")

    def _binary(
        self, root: Node, op: str, mirrored: str | None, takes_number: bool
    ) -> None:
        left, right = root.ptr1, root.ptr2
        if left is None or right is None:
            raise SplError(f"operator {op} needs two operands")
        right_is_number = takes_number and right.nodetype == NodeType.NUM
        if left.nodetype == NodeType.REG:
            reg1 = register_name(left.value)
            if right.nodetype == NodeType.REG:
                reg = self._claim()
                self._emit(f"MOV R{reg}, {reg1}", f"{op} R{reg}, {register_name(right.value)}")
            elif right_is_number:
                reg = self._claim()
                self._emit(f"MOV R{reg}, {reg1}", f"{op} R{reg}, {right.value}")
            elif mirrored is not None:
                self.generate_expression(right)
                self._emit(f"{mirrored} R{self._top()}, {reg1}")
            else:
                reg = self._claim()
                self._emit(f"MOV R{reg}, {reg1}")
                self.generate_expression(right)
                self._emit(f"{op} R{self._top(2)}, R{self._top()}")
                self.regcount -= 1
            return
        self.generate_expression(left)
        if right.nodetype == NodeType.REG:
            self._emit(f"{op} R{self._top()}, {register_name(right.value)}")
        elif right_is_number:
            self._emit(f"{op} R{self._top()}, {right.value}")
        else:
            self.generate_expression(right)
            self._emit(f"{op} R{self._top(2)}, R{self._top()}")
            self.regcount -= 1

    def _not(self, root: Node) -> None:
        operand = root.ptr1
        if operand is None:
            raise SplError("operator NOT needs an operand")
        reg = self._claim()
        self._emit(f"MOV R{reg}, 1")
        if operand.nodetype == NodeType.REG:
            self._emit(f"SUB R{self._top()}, {register_name(operand.value)}")
        else:
            self.generate_expression(operand)
            self._emit(f"SUB R{self._top(2)}, R{self._top()}")
            self.regcount -= 1