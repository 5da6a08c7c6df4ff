"""Code generation for ExpL statements."""

from __future__ import annotations

from dataclasses import dataclass

from xsmforge.explcalls import ExplCallGenerator
from xsmforge.explexpr import CodegenError
from xsmforge.expltree import ASTNode, NodeKind

# Scratch memory word used to pass an array element's address to Read.
READ_ADDRESS_SLOT = 2044


@dataclass
class ExplCodeGenerator(ExplCallGenerator):
    """Emits code for whole ExpL programs.

    ``w1`` and ``w2`` are the start and end labels of the most recently
    entered while loop, used by break and continue.
    """

    w1: int = 0
    w2: int = 0

    def generate(self, root: ASTNode | None) -> int:
        """Generate code for ``root`` and return the register of its value."""
        if root is None:
            return 0
        handlers = {
            NodeKind.DEFAULT: self._sequence,
            NodeKind.ASGN: self._assign,
            NodeKind.ARRAY_ASGN: self._array_assign,
            NodeKind.READ: self._read,
            NodeKind.ARRAY_READ: self._array_read,
            NodeKind.WRITE: self._write,
            NodeKind.IF: self._if,
            NodeKind.IF_ELSE: self._if_else,
            NodeKind.WHILE: self._while,
            NodeKind.RET: self._return,
        }
        handler = handlers.get(root.nodetype)
        if handler is not None:
            handler(root)
            return 0
        if root.nodetype == NodeKind.BRK:
            self._emit(f"JMP L{self.w2}")
            return 0
        if root.nodetype == NodeKind.CONTINUE:
            self._emit(f"JMP L{self.w1}")
            return 0
        if root.nodetype == NodeKind.BRKP:
            self._emit("BRKP")
            return 0
        return super().generate(root)

    @staticmethod
    def _require(node: ASTNode | None, what: str) -> ASTNode:
        if node is None:
            raise CodegenError(f"missing {what}")
        return node

    def _sequence(self, root: ASTNode) -> None:
        self.generate(root.ptr1)
        self.generate(root.ptr2)

    def _assign(self, root: ASTNode) -> None:
        target = self._require(root.ptr1, "assignment target")
        number = self.generate(root.ptr2)
        if target.nodetype == NodeKind.FIELD:
            self.fld = True
            r1 = self.generate(target)
            self._emit(f"MOV [R{r1}],R{number}")
            self._freereg()
        elif (local := self._local_offset(target.name)) is not None:
            r1 = self._getreg()
            r2 = self._local_slot(r1, local)
            self._emit(f"MOV [R{r2}],R{number}")
            self._freereg()
            self._freereg()
        elif (param := self._param_offset(target.name)) is not None:
            r1 = self._param_slot(param)
            self._emit(f"MOV [R{r1}],R{number}")
            self._freereg()
        else:
            self._emit(f"MOV [{self._global_binding(target)}],R{number}")
        self._freereg()

    def _array_assign(self, root: ASTNode) -> None:
        array = self._require(root.ptr1, "array")
        offset = self.generate(root.ptr2)
        r1 = self._getreg()
        self._emit(f"MOV R{r1},{self._global_binding(array)}", f"ADD R{offset},R{r1}")
        self._freereg()
        r1 = self.generate(root.ptr3)
        self._emit(f"MOV [R{offset}],R{r1}")
        self._freereg()
        self._freereg()

    def _read_header(self) -> None:
        self._emit('MOV R0,"Read"', "PUSH R0", "MOV R0,-1", "PUSH R0")

    def _finish_read(self, temporary: int, status: int) -> None:
        self._emit("ADD SP,2")
        self._freeallreg()
        self._emit("CALL 0", "SUB SP,5")
        self._emit(*("POP R0" for _ in range(temporary)))
        self._restore_registers(status)

    def _read(self, root: ASTNode) -> None:
        target = self._require(root.ptr2, "read target")
        temporary = 0
        if target.nodetype == NodeKind.FIELD:
            self.fld = True
            self._save_registers()
            self._read_header()
            r2 = self.generate(target)
            self._emit(f"PUSH R{r2}")
            self._freereg()
            temporary = 1
        elif (local := self._local_offset(target.name)) is not None:
            r2 = self._getreg()
            r3 = self._getreg()
            self._emit(f"MOV R{r3},BP", f"MOV R{r2},{local + 1}", f"ADD R{r3},R{r2}")
            self._save_registers()
            self._read_header()
            self._emit(f"PUSH R{r3}")
            self._freereg()
            self._freereg()
            temporary = 2
        elif (param := self._param_offset(target.name)) is not None:
            r2 = self._param_slot(param)
            self._save_registers()
            self._read_header()
            self._emit(f"PUSH R{r2}")
            self._freereg()
            temporary = 1
        else:
            self._save_registers()
            self._read_header()
            self._emit(f"MOV R0,{self._global_binding(target)}", "PUSH R0")
        self._finish_read(temporary, self.counter)

    def _array_read(self, root: ASTNode) -> None:
        array = self._require(root.ptr2, "array")
        offset = self.generate(root.ptr3)
        r1 = self._getreg()
        self._emit(f"MOV R{r1},{self._global_binding(array)}")
        r2 = self._getreg()
        l1 = self._getlabel()
        self._emit(
            f"MOV R{r2},{array.gentry.size}",
            f"GT R{r2},R{offset}",
            f"JNZ R{r2},L{l1}",
            "INT 10",
            f"L{l1}:",
        )
        self._freereg()
        self._emit(f"ADD R{offset},R{r1}")
        self._freereg()
        self._emit(f"MOV [{READ_ADDRESS_SLOT}],R{offset}")
        self._save_registers()
        self._read_header()
        self._emit(f"MOV R0,[{READ_ADDRESS_SLOT}]", "PUSH R0")
        self._freereg()
        self._finish_read(1, self.counter)

    def _write(self, root: ASTNode) -> None:
        status = self._save_registers()
        self._emit('MOV R0,"Write"', "PUSH R0", "MOV R0,-2", "PUSH R0")
        number = self.generate(root.ptr2)
        self._emit(f"PUSH R{number}")
        self._freereg()
        self._emit("ADD SP,2")
        self._freeallreg()
        self._emit("CALL 0", "SUB SP,5")
        self._restore_registers(status)

    def _if(self, root: ASTNode) -> None:
        l1 = self._getlabel()
        number = self.generate(root.ptr1)
        self._emit(f"JZ R{number},L{l1}")
        self.generate(root.ptr2)
        self._emit(f"L{l1}:")
        self._freereg()

    def _if_else(self, root: ASTNode) -> None:
        number = self.generate(root.ptr1)
        l1 = self._getlabel()
        l2 = self._getlabel()
        self._emit(f"JZ R{number},L{l1}")
        self._freereg()
        self.generate(root.ptr2)
        self._emit(f"JMP L{l2}", f"L{l1}:")
        self._freereg()
        self.generate(root.ptr3)
        self._emit(f"L{l2}:")

    def _while(self, root: ASTNode) -> None:
        l1 = self._getlabel()
        l2 = self._getlabel()
        self.w1, self.w2 = l1, l2
        self._emit(f"L{l1}:")
        number = self.generate(root.ptr1)
        self._emit(f"JZ R{number},L{l2}")
        self._freereg()
        self.generate(root.ptr2)
        self._emit(f"JMP L{l1}", f"L{l2}:")
        self._freereg()

    def _return(self, root: ASTNode) -> None:
        result = self.generate(root.ptr2)
        r1 = self._getreg()
        self._emit(f"MOV R{r1},BP")
        r2 = self._getreg()
        self._emit(f"MOV R{r2},2", f"SUB R{r1},R{r2}")
        self._freereg()
        self._emit(f"MOV [R{r1}],R{result}")
        self._freereg()
        self._freereg()
        self._emit(*("POP R0" for _ in self.symbols.local_symbols))
        self._emit("MOV BP,[SP]", "POP R0", "RET")