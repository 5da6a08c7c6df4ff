"""Assembly routines that manage the ExpL heap of fixed-size blocks."""

from __future__ import annotations


def _render(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def initialize_routine() -> str:
    """Return the routine that builds the free list of heap blocks."""
    return _render(
        [
            "INITIALIZE:",
            "PUSH BP",
            "MOV BP, SP",
            "MOV R0,0",
            "MOV R1,1",
            "L0:",
            "MOV [R0],-1",
            "ADD R0,R1",
            "MOV R2,255",
            "GE R2,R0",
            "JZ R2,L1",
            "JMP L0",
            "L1:",
            "MOV R0,0",
            "MOV R1,16",
            "MOV R3,16",
            "L2:",
            "MOV [R0],R1",
            "ADD R1,R3",
            "ADD R0,R3",
            "MOV R2,255",
            "GE R2,R0",
            "JZ R2,L3",
            "JMP L2",
            "L3:",
            "MOV [240],-1",
            "MOV [256],0",
            "MOV BP, [SP]",
            "POP R0",
            "RET",
        ]
    )


def alloc_routine() -> str:
    """Return the routine that takes a block off the free list into BP-2."""
    return _render(
        [
            "ALLOC:",
            "PUSH BP",
            "MOV BP, SP",
            "MOV R0, [256]",
            "MOV R1, [R0]",
            "MOV [256], R1",
            "MOV R1, BP",
            "MOV R2, 2",
            "SUB R1, R2",
            "MOV [R1], R0",
            "MOV BP, [SP]",
            "POP R0",
            "RET",
        ]
    )


def free_routine() -> str:
    """Return the routine that puts the block passed at BP-2 back on the list."""
    return _render(
        [
            "FREE:",
            "PUSH BP",
            "MOV BP, SP",
            "MOV R0, 2",
            "MOV R1, BP",
            "SUB R1, R0",
            "MOV R0, [R1]",
            "MOV R1, [256]",
            "MOV [256], R0",
            "MOV [R0], R1",
            "MOV BP, [SP]",
            "POP R0",
            "RET",
        ]
    )