# xsmforge

Building blocks for compilers that emit assembly for the XSM machine. The
package works on syntax trees and symbol tables that a caller builds; it
returns the generated assembly as text.

## SPL (system programming language)

- `xsmforge.splnodes` – `NodeType`, the `Node` dataclass, `create_term_node`,
  `create_nonterm_node`, `create_tree`, and register helpers
  `is_allowed_register` and `register_name`.
- `xsmforge.spllabels` – `LabelTable` hands out generated labels (`_L1`,
  `_L2`, …), records declared labels and keeps the stack of open while loops;
  `LabelError` is raised on redeclaration or on break/continue outside a loop.
- `xsmforge.splsymbols` – `SymbolTable` holds symbolic constants and
  block-scoped register aliases (`push_alias`, `pop_alias`, `insert_constant`,
  `load_constants`, `substitute_id`); errors are raised as `SplError`.
- `xsmforge.splexpr` – `ExpressionGenerator` for arithmetic, comparison and
  logical expressions; `RegisterOverflowError` when an expression needs too
  many scratch registers.
- `xsmforge.splstatements` – `StatementGenerator` adds assignments,
  LOAD/STORE/LOADI and MULTIPUSH/MULTIPOP.
- `xsmforge.splcodegen` – `CodeGenerator` for whole trees (if, while, break,
  continue, call, goto, print, read, inline code and more) and the shortcut
  `compile_tree(root, labels)`.
- `xsmforge.splfiles` – `expand_path` (replaces a leading `$NAME` component by
  the environment variable), `remove_extension` and `output_filename`
  (`prog.spl` → `prog.xsm`).

## ExpL (expression language)

- `xsmforge.expltree` – `NodeKind`, the `ASTNode` dataclass and `tree_create`.
- `xsmforge.explsymbols` – `SymbolTables` with global, local, parameter, type
  and field tables; `SemanticError` on redeclaration.
- `xsmforge.expltypecheck` – `TypeChecker` (`verify`, `install_id`,
  `type_comp`, `type_assign`, `type_assign_arr`), plus `prologue(total_count)`
  for the program header and start-up code and `get_last(head)`.
- `xsmforge.explexpr`, `xsmforge.explcalls`, `xsmforge.explcodegen` –
  `ExplExpressionGenerator`, `ExplCallGenerator` and `ExplCodeGenerator`,
  each extending the previous one: expressions, then function calls, heap and
  system calls, then statements, loops, reads and writes. `CodegenError` is
  raised for trees that cannot be compiled.
- `xsmforge.heaproutines` – `initialize_routine`, `alloc_routine` and
  `free_routine` return the heap management routines as assembly text.
- `xsmforge.labelmap` – `LabelMap` records label addresses (`append`, `find`,
  which returns -1 for an unknown label, and `listing`).

## Installation

```
pip install .
```

Install with the `test` extra to run the test suite:

```
pip install .[test]
pytest
```

## Examples

Compile a small SPL tree:

```python
from xsmforge.splnodes import NodeType, create_term_node, create_nonterm_node
from xsmforge.splcodegen import compile_tree

target = create_term_node(NodeType.REG, None, 0)
value = create_term_node(NodeType.NUM, None, 5)
tree = create_nonterm_node(NodeType.ASSIGN, target, value)

print(compile_tree(tree, None))   # MOV R0, 5
```

Assign to an ExpL global:

```python
from xsmforge.explcodegen import ExplCodeGenerator
from xsmforge.explsymbols import SymbolTables
from xsmforge.expltree import NodeKind, tree_create

symbols = SymbolTables()
symbols.tinstall("integer", 1, None)
x = symbols.ginstall("x", symbols.tlookup("integer"), 1, None)

ident = tree_create(None, NodeKind.ID, "x", None, None, None, None, None)
ident.gentry = x
number = tree_create(None, NodeKind.NUM, None, 7, None, None, None, None)
assign = tree_create(None, NodeKind.ASGN, None, None, None, ident, number, None)

generator = ExplCodeGenerator(symbols=symbols)
generator.generate(assign)
print(generator.text())   # MOV R0,7 / MOV [4096],R0
```

## Test data

The `xsmforge-numbers` command writes the integers 0 to 2047, one per line, to
`numbers.dat` in the current directory (a different path and `--count` may be
given):

```
xsmforge-numbers
```

The same is available from Python as `xsmforge.numbers.write_numbers(path, count)`.

## What the package does not do

- There is no lexer or parser: SPL and ExpL program text cannot be read;
  syntax trees have to be built in code.
- There is no command that compiles an SPL or ExpL file to an `.xsm` file;
  only the file-name helpers in `xsmforge.splfiles` are provided.
- `xsmforge.labelmap` only stores label addresses; no pass that rewrites
  labels in assembly text to addresses is included.