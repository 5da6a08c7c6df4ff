"""Code generation for SPL assignments, memory transfers and stack lists."""

from __future__ import annotations

from dataclasses import dataclass

from xsmforge.splexpr import ExpressionGenerator
from xsmforge.splnodes import C_REG_BASE, Node, NodeType, register_name
from xsmforge.splsymbols import SplError

_MEMORY: dict[int, str] = {
    NodeType.LOAD: "LOAD",
    NodeType.STORE: "STORE",
    NodeType.LOADI: "LOADI",
}


@dataclass
class StatementGenerator(ExpressionGenerator):
    """Emits code for assignment, LOAD/STORE/LOADI and MULTIPUSH/MULTIPOP."""

    def _store_value(self, dest: str, value: Node) -> None:
        """Move ``value`` into the location written as ``dest``."""
        kind = value.nodetype
        if kind == NodeType.REG:
            self._emit(f"MOV {dest}, {register_name(value.value)}")
        elif kind == NodeType.NUM:
            self._emit(f"MOV {dest}, {value.value}")
        elif kind == NodeType.STRING:
            self._emit(f"MOV {dest}, {value.name}")
        elif kind == NodeType.PORT:
            scratch = C_REG_BASE + self.regcount
            self._emit(
                f"PORT R{scratch}, {register_name(value.value)}",
                f"MOV {dest}, R{scratch}",
            )
        else:
            self.generate_expression(value)
            self._emit(f"MOV {dest}, R{self._top()}")
            self.regcount -= 1

    def generate_assign(self, root: Node) -> None:
        """Generate code for an assignment to a register or a memory word."""
        if root.nodetype != NodeType.ASSIGN:
            raise SplError(f"Unknown Command {root.nodetype} {root.name}")
        target, value = root.ptr1, root.ptr2
        if target is None or value is None:
            raise SplError("assignment needs a target and a value")
        if target.nodetype != NodeType.ADDR_EXPR:
            self._store_value(register_name(target.value), value)
            return
        address = target.ptr1
        if address is None:
            raise SplError("address expression without an address")
        if address.nodetype == NodeType.NUM:
            self._store_value(f"[{address.value}]", value)
        elif address.nodetype == NodeType.REG:
            self._store_value(f"[{register_name(address.value)}]", value)
        else:
            self.generate_expression(address)
            self._store_value(f"[R{self._top()}]", value)
            self.regcount -= 1

    def _memory_operand(self, node: Node) -> tuple[str, bool]:
        """Return the operand text and whether a scratch register was taken."""
        if node.nodetype == NodeType.REG:
            return register_name(node.value), False
        if node.nodetype == NodeType.NUM:
            return str(node.value), False
        self.generate_expression(node)
        return f"R{self._top()}", True

    def generate_memory(self, root: Node) -> None:
        """Generate code for LOAD, STORE or LOADI between pages and blocks."""
        op = _MEMORY.get(root.nodetype)
        if op is None:
            raise SplError(f"Unknown Command {root.nodetype} {root.name}")
        left, right = root.ptr1, root.ptr2
        if left is None or right is None:
            raise SplError(f"{op} needs two operands")
        if left.nodetype == NodeType.REG:
            dest = register_name(left.value)
            operand, taken = self._memory_operand(right)
            self._emit(f"{op} {dest}, {operand}")
            if taken:
                self.regcount -= 1
            return
        self.generate_expression(left)
        dest = f"R{self._top()}"
        operand, taken = self._memory_operand(right)
        self._emit(f"{op} {dest}, {operand}")
        if taken:
            self.regcount -= 1
        self.regcount -= 1

    def generate_stack(self, root: Node) -> None:
        """Generate PUSH or POP lines for a chain of registers.

        Registers are pushed in list order and popped in reverse order.
        """
        if root.nodetype == NodeType.MULTIPUSH:
            op = "PUSH"
        elif root.nodetype == NodeType.MULTIPOP:
            op = "POP"
        else:
            raise SplError(f"Unknown Command {root.nodetype} {root.name}")
        names = []
        node = root.ptr1
        while node is not None:
            names.append(register_name(node.value))
            node = node.ptr1
        if op == "POP":
            names.reverse()
        self._emit(*(f"{op} {name}" for name in names))