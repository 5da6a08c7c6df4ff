"""Code generation for ExpL function calls and system calls."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from xsmforge.explexpr import CodegenError, ExplExpressionGenerator
from xsmforge.expltree import ASTNode, NodeKind

# Argument slots pushed for every system call.
SYSCALL_SLOTS = 4


@dataclass
class ExplCallGenerator(ExplExpressionGenerator):
    """Adds user function calls, argument lists and library calls.

    ``we2`` is set while the arguments of a ``Read`` call are pushed; its
    second argument is then passed by address.
    """

    we2: bool = False

    def generate(self, root: ASTNode | None) -> int:
        """Generate code for ``root`` and return the register of its value."""
        if root is None:
            return 0
        handlers: dict[int, Callable[[ASTNode], int]] = {
            NodeKind.EXPR: self._arguments,
            NodeKind.FUNC: self._call,
            NodeKind.ALLOC: self._alloc,
            NodeKind.FREE: self._free,
            NodeKind.INIT: self._init,
            NodeKind.EXPOSCALL: self._exposcall,
        }
        handler = handlers.get(root.nodetype)
        if handler is not None:
            return handler(root)
        return super().generate(root)

    def _save_registers(self) -> int:
        self._emit(*(f"PUSH R{i}" for i in range(self.counter + 1)))
        return self.counter

    def _restore_registers(self, status: int) -> int:
        """Pop the saved registers and return how many were popped."""
        self._emit(*(f"POP R{i}" for i in range(status, -1, -1)))
        self.counter = status
        return status + 1

    def _fetch_result(self, popped: int) -> int:
        """Load the return value left below the stack top after a system call."""
        r1 = self._getreg()
        r2 = self._getreg()
        self._emit(
            f"MOV R{r1},{popped + 5}",
            f"MOV R{r2},SP",
            f"ADD R{r2},R{r1}",
            f"MOV R{r1},[R{r2}]",
        )
        self._freereg()
        return r1

    def _push_argument(self, node: ASTNode) -> None:
        reg = self.generate(node)
        self._emit(f"PUSH R{reg}")
        self._freereg()

    def _arguments(self, root: ASTNode) -> int:
        node = root
        while node.nodetype == NodeKind.EXPR:
            if node.ptr1 is None or node.ptr2 is None:
                raise CodegenError("malformed argument list")
            self._push_argument(node.ptr1)
            node = node.ptr2
        self._push_argument(node)
        return 0

    def _call(self, root: ASTNode) -> int:
        status = self._save_registers()
        self._freeallreg()
        if root.ptr2 is not None:
            self.generate(root.ptr2)
        elif root.ptr3 is not None:
            self._push_argument(root.ptr3)
        self._emit("PUSH R0")
        symbol = self.symbols.glookup(root.name) if root.name is not None else None
        if symbol is None:
            raise CodegenError(f"undeclared function {root.name}")
        self._emit(f"CALL F{symbol.binding}", f"POP R{status + 1}")
        if status == -1:
            self._getreg()
        r2 = self._getreg()
        self._emit(*(f"POP R{r2}" for _ in symbol.paramlist or ()))
        if status == -1:
            self._freereg()
        self._freereg()
        self._restore_registers(status)
        return self._getreg()

    def _alloc(self, root: ASTNode) -> int:
        status = self._save_registers()
        self._freeallreg()
        self._emit(
            'MOV R0,"Alloc"',
            "PUSH R0",
            "MOV R0,8",
            "PUSH R0",
            "ADD SP,2",
            "PUSH R0",
            "CALL 0",
            "SUB SP,5",
        )
        popped = self._restore_registers(status)
        return self._fetch_result(popped)

    def _free(self, root: ASTNode) -> int:
        self._getreg()
        r1 = self.generate(root.ptr2)
        status = self._save_registers()
        self._freeallreg()
        self._emit(
            'MOV R0,"Free"',
            "PUSH R0",
            f"PUSH R{r1}",
            "ADD SP,2",
            "PUSH R0",
            "CALL 0",
            "SUB SP,5",
        )
        self._restore_registers(status)
        return 0

    def _init(self, root: ASTNode) -> int:
        status = self._save_registers()
        self._freeallreg()
        self._emit(
            'MOV R0,"Heapset"',
            "PUSH R0",
            "ADD SP,3",
            "PUSH R0",
            "CALL 0",
            "SUB SP,5",
        )
        self._restore_registers(status)
        return 0

    def _exposcall(self, root: ASTNode) -> int:
        status = self._save_registers()
        self._freeallreg()
        current = root.ptr3
        if current is None:
            raise CodegenError("system call without a function code")
        if current.name == "Read":
            self.we2 = True
        if current.nodetype == NodeKind.STRVAL:
            self._emit(f'MOV R0,"{current.name}"', "PUSH R0")
        elif current.nodetype == NodeKind.ID:
            number = self.generate(current)
            self._emit(f"MOV R0,R{number}", "PUSH R0")
        arg_count = 1
        current = current.ptr1
        while current is not None:
            kind = current.nodetype
            if kind == NodeKind.STRVAL:
                self._emit(f'MOV R0,"{current.name}"')
            elif kind == NodeKind.NUM:
                self._emit(f"MOV R0,{current.value}")
            elif kind in (NodeKind.ID, NodeKind.ARRAY, NodeKind.FIELD):
                if arg_count == 2 and self.we2:
                    self.fld = True
                    self.we2 = False
                number = self.generate(current)
                self._emit(f"MOV R0,R{number}")
            self._emit("PUSH R0")
            arg_count += 1
            current = current.ptr1
        while arg_count < SYSCALL_SLOTS:
            self._emit("PUSH R0")
            arg_count += 1
        self._emit("PUSH R0", "CALL 0", "SUB SP,5")
        popped = self._restore_registers(status)
        return self._fetch_result(popped)