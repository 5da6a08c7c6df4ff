import pytest

from xsmforge.splnodes import Node, NodeType
from xsmforge.splsymbols import SplError, SymbolTable


def test_insert_and_lookup_constant():
    table = SymbolTable()
    table.insert_constant("PAGE", 512)
    assert table.lookup_constant("PAGE") == 512
    assert table.lookup_constant("MISSING") is None


def test_duplicate_constant_raises():
    table = SymbolTable()
    table.insert_constant("A", 1)
    with pytest.raises(SplError):
        table.insert_constant("A", 2)


def test_push_and_lookup_alias():
    table = SymbolTable()
    alias = table.push_alias("counter", 3)
    assert table.lookup_alias("counter") is alias
    assert table.lookup_alias_reg(3) is alias
    assert alias.depth == 0


def test_alias_clashing_with_constant_raises():
    table = SymbolTable()
    table.insert_constant("X", 7)
    with pytest.raises(SplError):
        table.push_alias("X", 1)


def test_alias_redeclared_in_same_block_raises():
    table = SymbolTable()
    table.push_alias("a", 1)
    with pytest.raises(SplError):
        table.push_alias("a", 2)


def test_same_register_same_block_renames():
    table = SymbolTable()
    first = table.push_alias("a", 4)
    second = table.push_alias("b", 4)
    assert second is first
    assert first.name == "b"
    assert table.lookup_alias("a") is None
    assert len(table.aliases) == 1


def test_inner_block_shadows_and_pop_restores():
    table = SymbolTable()
    outer = table.push_alias("a", 1)
    table.depth = 1
    inner = table.push_alias("a", 2)
    assert table.lookup_alias("a") is inner
    table.pop_alias()
    table.depth = 0
    assert table.lookup_alias("a") is outer


def test_pop_alias_only_removes_current_depth():
    table = SymbolTable()
    table.push_alias("a", 1)
    table.depth = 1
    table.push_alias("b", 2)
    table.pop_alias()
    assert table.lookup_alias("b") is None
    assert table.lookup_alias("a") is not None and table.lookup_alias("a").reg == 1


def test_substitute_constant():
    table = SymbolTable()
    table.insert_constant("SIZE", 512)
    node = Node(NodeType.IDENT, name="SIZE")
    result = table.substitute_id(node)
    assert result is node
    assert node.nodetype == NodeType.NUM
    assert node.value == 512
    assert node.name is None


def test_substitute_alias():
    table = SymbolTable()
    table.push_alias("ptr", 5)
    node = table.substitute_id(Node(NodeType.IDENT, name="ptr"))
    assert node.nodetype == NodeType.REG
    assert node.value == 5


def test_substitute_unknown_raises():
    table = SymbolTable()
    with pytest.raises(SplError, match="Unknown identifier"):
        table.substitute_id(Node(NodeType.IDENT, name="nothing"))


def test_load_constants(tmp_path):
    cfg = tmp_path / "splconstants.cfg"
    cfg.write_text("PAGE_SIZE 512\nPAGE_PER_INTERRUPT 2\n")
    table = SymbolTable()
    table.load_constants(cfg)
    assert table.lookup_constant("PAGE_SIZE") == 512
    assert table.lookup_constant("PAGE_PER_INTERRUPT") == 2


def test_load_constants_stops_at_bad_pair(tmp_path):
    cfg = tmp_path / "c.cfg"
    cfg.write_text("A 1\nB oops\nC 3\n")
    table = SymbolTable()
    table.load_constants(cfg)
    assert table.constants == {"A": 1}


def test_load_constants_missing_file(tmp_path):
    with pytest.raises(SplError):
        SymbolTable().load_constants(tmp_path / "absent.cfg")