"""Abstract syntax tree of the ExpL compiler."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

FALSE = 0
TRUE = 1
TYPE_INT = 2
TYPE_BOOL = 3
TYPE_VOID = 4
TYPE_STR = 47
SYMBOL_FUNC_INT = 34
SYMBOL_FUNC_BOOLEAN = 35
TYPE_DEFAULT = 200


class NodeKind(IntEnum):
    """Kinds of ExpL syntax-tree nodes."""

    ASGN = 5
    READ = 6
    WRITE = 7
    IF = 8
    IF_ELSE = 9
    ID = 10
    PLUS = 11
    MINUS = 12
    MUL = 13
    LT = 14
    GT = 15
    DEQ = 16
    NUM = 17
    WHILE = 18
    T = 20
    F = 21
    LE = 22
    GE = 23
    ARRAY = 24
    DIV = 25
    MOD = 26
    NEQ = 27
    ARRAY_ASGN = 28
    ARRAY_READ = 29
    AND = 30
    OR = 31
    NOT = 32
    FUNC = 33
    RET = 36
    BODY = 37
    MAIN = 38
    EXPR = 39
    FIELD = 40
    ALLOC = 41
    FREE = 42
    NILL = 43
    INIT = 44
    BRK = 45
    CONTINUE = 46
    STRVAL = 48
    EXPOSCALL = 49
    BRKP = 50
    NEW = 51
    CLASS_FUNC = 52
    DEFAULT = 100


@dataclass(eq=False)
class ASTNode:
    """A node of the ExpL syntax tree."""

    type: Any = None
    nodetype: int = NodeKind.DEFAULT
    name: str | None = None
    value: int | None = None
    arglist: ASTNode | None = None
    ptr1: ASTNode | None = None
    ptr2: ASTNode | None = None
    ptr3: ASTNode | None = None
    gentry: Any = None
    lentry: Any = None


def tree_create(
    typ: Any,
    nodetype: int,
    name: str | None,
    value: int | None,
    arglist: ASTNode | None,
    ptr1: ASTNode | None,
    ptr2: ASTNode | None,
    ptr3: ASTNode | None,
) -> ASTNode:
    """Build a syntax-tree node."""
    return ASTNode(
        type=typ,
        nodetype=nodetype,
        name=name,
        value=value,
        arglist=arglist,
        ptr1=ptr1,
        ptr2=ptr2,
        ptr3=ptr3,
    )