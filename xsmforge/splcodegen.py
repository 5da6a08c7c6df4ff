"""Code generation for whole SPL programs."""

from __future__ import annotations

from dataclasses import dataclass, field

from xsmforge.spllabels import LabelTable
from xsmforge.splnodes import Node, NodeType, register_name
from xsmforge.splstatements import StatementGenerator
from xsmforge.splsymbols import SplError

_SIMPLE: dict[int, str] = {
    NodeType.BACKUP: "BACKUP",
    NodeType.RESTORE: "RESTORE",
    NodeType.RETURN: "RET",
    NodeType.IRETURN: "IRET",
    NodeType.HALT: "HALT",
    NodeType.BREAKPOINT: "BRKP",
    NodeType.READ: "IN",
}

_EXPRESSIONS = frozenset(
    {
        NodeType.LT,
        NodeType.GT,
        NodeType.EQ,
        NodeType.LE,
        NodeType.GE,
        NodeType.NE,
        NodeType.AND,
        NodeType.OR,
        NodeType.NOT,
        NodeType.ADD,
        NodeType.SUB,
        NodeType.MUL,
        NodeType.DIV,
        NodeType.MOD,
        NodeType.ADDR_EXPR,
        NodeType.NUM,
        NodeType.STRING,
        NodeType.REG,
    }
)


@dataclass
class CodeGenerator(StatementGenerator):
    """Emits machine code for statements, control flow and expressions.

    ``labels`` holds the labels declared in the program, used to check the
    targets of CALL and GOTO, and the stack of open while loops.
    """

    labels: LabelTable = field(default_factory=LabelTable)

    def _emit_uncounted(self, line: str) -> None:
        self._out.append(f"{line}\n")

    def _jump_if_zero(self, condition: Node, target: str) -> None:
        if condition.nodetype == NodeType.REG:
            self._emit(f"JZ {register_name(condition.value)}, {target}")
        else:
            self.generate_expression(condition)
            self._emit(f"JZ R{self._top()}, {target}")
            self.regcount -= 1

    def generate(self, root: Node | None) -> None:
        """Generate code for any SPL tree."""
        if root is None:
            return
        kind = root.nodetype
        if kind == NodeType.STMTLIST:
            self.generate(root.ptr1)
            self.generate(root.ptr2)
        elif kind in _SIMPLE:
            self._emit(_SIMPLE[kind])
        elif kind == NodeType.IF:
            self._if(root)
        elif kind == NodeType.WHILE:
            self._while(root)
        elif kind == NodeType.BREAK:
            self._emit(f"JMP {self.labels.while_end().name}")
        elif kind == NodeType.CONTINUE:
            self._emit(f"JMP {self.labels.while_start().name}")
        elif kind == NodeType.ASSIGN:
            self.generate_assign(root)
        elif kind in (NodeType.LOAD, NodeType.STORE, NodeType.LOADI):
            self.generate_memory(root)
        elif kind in (NodeType.MULTIPUSH, NodeType.MULTIPOP):
            self.generate_stack(root)
        elif kind == NodeType.READI:
            reg = register_name(self._child(root).value)
            self._emit("INI", f"PORT {reg}, P0")
        elif kind == NodeType.PRINT:
            self.generate_expression(self._child(root))
            self._emit(f"PORT P1, R{self._top()}", "OUT")
            self.regcount -= 1
        elif kind == NodeType.INLINE:
            self._emit(f"{self._child(root).name}")
        elif kind == NodeType.ENCRYPT:
            self._emit(f"ENCRYPT {register_name(self._child(root).value)}")
        elif kind == NodeType.LABEL_DEF:
            self._emit_label(f"{self._child(root).name}")
        elif kind == NodeType.CALL:
            self._transfer(root, "CALL")
        elif kind == NodeType.GOTO:
            self._transfer(root, "JMP")
        elif kind in _EXPRESSIONS:
            self.generate_expression(root)
        else:
            raise SplError(f"Unknown Command {root.nodetype} {root.name}")

    @staticmethod
    def _child(root: Node) -> Node:
        if root.ptr1 is None:
            raise SplError(f"Command {root.nodetype} needs an operand")
        return root.ptr1

    def _if(self, root: Node) -> None:
        else_label = self.labels.create()
        end_label = self.labels.create()
        self._jump_if_zero(self._child(root), else_label.name)
        self.generate(root.ptr2)
        self._emit(f"JMP {end_label.name}")
        self._emit_label(else_label.name)
        self.generate(root.ptr3)
        self._emit_label(end_label.name)

    def _while(self, root: Node) -> None:
        start = self.labels.create()
        end = self.labels.create()
        self.labels.push_while(start, end)
        self._emit_label(start.name)
        self._jump_if_zero(self._child(root), end.name)
        self.generate(root.ptr2)
        self._emit(f"JMP {start.name}")
        self.labels.pop_while()
        self._emit_label(end.name)

    def _transfer(self, root: Node, op: str) -> None:
        target = self._child(root)
        if target.nodetype == NodeType.NUM:
            self._emit_uncounted(f"{op} {target.value}")
            return
        if target.name is None or self.labels.get(target.name) is None:
            raise SplError(f"{root.value}: Label '{target.name}' is not declared")
        self._emit_uncounted(f"{op} {target.name}")


def compile_tree(root: Node | None, labels: LabelTable | None = None) -> str:
    """Compile a whole program tree and return the generated code."""
    generator = CodeGenerator(labels=labels if labels is not None else LabelTable())
    generator.generate(root)
    return generator.text()