import pytest

from xsmforge.explsymbols import SemanticError, SymbolTables


@pytest.fixture
def tables():
    t = SymbolTables()
    for name in ["integer", "string", "boolean", "dummy"]:
        t.tinstall(name, 1, None)
    return t


def test_first_global_is_bound_at_base(tables):
    x = tables.ginstall("x", tables.tlookup("integer"), 1, None)
    assert x.binding == 4096


def test_globals_are_laid_out_consecutively(tables):
    a = tables.ginstall("a", tables.tlookup("integer"), 10, None)
    b = tables.ginstall("b", tables.tlookup("integer"), 1, None)
    assert b.binding == a.binding + a.size
    assert tables.total_count == b.binding + b.size


def test_functions_get_function_numbers(tables):
    f = tables.ginstall("f", tables.tlookup("integer"), -1, [])
    g = tables.ginstall("g", tables.tlookup("integer"), -1, None)
    assert f.binding == 0
    assert g.binding == f.binding + 1
    assert tables.total_count == 4096


def test_duplicate_global_raises(tables):
    tables.ginstall("x", tables.tlookup("integer"), 1, None)
    with pytest.raises(SemanticError, match="x"):
        tables.ginstall("x", tables.tlookup("string"), 1, None)


def test_glookup(tables):
    sym = tables.ginstall("y", tables.tlookup("string"), 1, None)
    assert tables.glookup("y") is sym
    assert tables.glookup("missing") is None


def test_locals_take_next_address(tables):
    before = tables.total_count
    loc = tables.linstall("i", tables.tlookup("integer"))
    assert loc.binding == before
    assert tables.total_count == before + 1
    assert tables.llookup("i") is loc
    assert tables.llookup("j") is None


def test_params_keep_order(tables):
    p1 = tables.pinstall("p", tables.tlookup("integer"))
    p2 = tables.pinstall("q", tables.tlookup("string"))
    assert tables.params == [p1, p2]
    assert tables.plookup("q") is p2
    assert tables.plookup("r") is None


def test_user_type_with_self_reference(tables):
    integer = tables.tlookup("integer")
    nxt = tables.finstall(tables.tlookup("dummy"), "next")
    val = tables.finstall(integer, "val")
    node_type = tables.tinstall("node", 0, tables.fields)
    assert tables.tlookup("node") is node_type
    assert nxt.type is node_type
    assert val.type is integer
    assert [f.field_index for f in node_type.fields] == [0, 1]
    assert node_type.size == len(node_type.fields)
    assert tables.fields == []


def test_flookup(tables):
    tables.finstall(tables.tlookup("integer"), "val")
    t = tables.tinstall("box", 0, tables.fields)
    assert tables.flookup("val", t.fields) is t.fields[0]
    assert tables.flookup("other", t.fields) is None


def test_listing(tables):
    tables.ginstall("x", tables.tlookup("integer"), 1, None)
    tables.ginstall("s", tables.tlookup("string"), 1, None)
    lines = tables.listing().splitlines()
    assert lines[0] == "x----integer-----4096"
    assert len(lines) == 2
    assert lines[1].startswith("s----string-----")