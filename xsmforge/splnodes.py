"""Syntax-tree nodes and register numbering for the SPL compiler."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

R0 = 0
R1 = 1
R2 = 2
R3 = 3
R4 = 4
R5 = 5
R6 = 6
R7 = 7
R8 = 8
R9 = 9
R10 = 10
R11 = 11
R12 = 12
R13 = 13
R14 = 14
R15 = 15
R16 = 16
R17 = 17
R18 = 18
R19 = 19

P0 = 20
P1 = 21
P2 = 22
P3 = 23

BP = 24
IP = 25
SP = 26
PTBR = 27
PTLR = 28
EIP = 29
EPN = 30
EC = 31
EMA = 32

NUM_GEN_REG = 20
NUM_PORTS = 4
NUM_SPECIAL_REG = 9

# Registers from this index upwards are reserved for the compiler.
C_REG_BASE = 16
REG_NAME_MAX_LEN = 5

_SPECIAL_NAMES = {
    BP: "BP",
    SP: "SP",
    IP: "IP",
    PTBR: "PTBR",
    PTLR: "PTLR",
    EIP: "EIP",
    EPN: "EPN",
    EC: "EC",
    EMA: "EMA",
}


class NodeType(IntEnum):
    """Kinds of SPL syntax-tree nodes."""

    IF = 0
    LOAD = 1
    STORE = 2
    LOADI = 3
    READ = 4
    READI = 5
    PRINT = 6
    REG = 7
    NUM = 8
    STRING = 9
    IDENT = 10
    NONTERM = 11
    STRCMP = 12
    STRCOPY = 13
    WHILE = 14
    EQ = 15
    GT = 16
    LT = 17
    LE = 18
    GE = 19
    NE = 20
    AND = 21
    OR = 22
    NOT = 23
    BREAK = 24
    CONTINUE = 25
    ADDR_EXPR = 26
    HALT = 27
    BREAKPOINT = 28
    RETURN = 29
    IRETURN = 30
    INLINE = 31
    ENCRYPT = 32
    STMTLIST = 33
    ADD = 34
    SUB = 35
    MUL = 36
    DIV = 37
    MOD = 38
    ASSIGN = 39
    BACKUP = 40
    RESTORE = 41
    GOTO = 42
    CALL = 43
    PORT = 44
    LABEL_DEF = 45
    MULTIPUSH = 46
    MULTIPOP = 47


@dataclass(eq=False)
class Node:
    """A node of the SPL syntax tree."""

    nodetype: int
    name: str | None = None
    value: int = 0
    ptr1: Node | None = None
    ptr2: Node | None = None
    ptr3: Node | None = None


def create_term_node(nodetype: int, name: str | None, value: int) -> Node:
    """Create a leaf node."""
    return Node(nodetype=nodetype, name=name, value=value)


def create_nonterm_node(nodetype: int, a: Node | None, b: Node | None) -> Node:
    """Create an inner node with two children."""
    return Node(nodetype=nodetype, ptr1=a, ptr2=b)


def create_tree(a: Node, b: Node | None, c: Node | None, d: Node | None) -> Node:
    """Attach up to three children to ``a`` and return it."""
    a.ptr1 = b
    a.ptr2 = c
    a.ptr3 = d
    return a


def is_allowed_register(value: int) -> bool:
    """Tell whether a register may be used directly by SPL programs."""
    return R0 <= value < R0 + C_REG_BASE


def register_name(value: int) -> str:
    """Return the machine name of a register number."""
    if R0 <= value <= R15:
        return f"R{value - R0}"
    if P0 <= value <= P3:
        return f"P{value - P0}"
    try:
        return _SPECIAL_NAMES[value]
    except KeyError:
        raise ValueError(f"no register name for value {value}") from None