import pytest

from xsmforge.explexpr import CodegenError, ExplExpressionGenerator
from xsmforge.explsymbols import SymbolTables
from xsmforge.expltree import ASTNode, NodeKind


def num(value):
    return ASTNode(nodetype=NodeKind.NUM, value=value)


def op(kind, a, b):
    return ASTNode(nodetype=kind, ptr1=a, ptr2=b)


@pytest.fixture
def symbols():
    tables = SymbolTables()
    tables.tinstall("integer", 1, None)
    return tables


def test_number_goes_to_first_register():
    gen = ExplExpressionGenerator()
    assert gen.generate(num(5)) == 0
    assert gen.text() == "MOV R0,5\n"


def test_addition_result_in_first_register():
    gen = ExplExpressionGenerator()
    assert gen.generate(op(NodeKind.PLUS, num(1), num(2))) == 0
    assert gen.text().splitlines()[-1] == "ADD R0,R1"
    assert gen.counter == 0


@pytest.mark.parametrize(
    "kind, instr",
    [
        (NodeKind.LE, "LE"),
        (NodeKind.GE, "GE"),
        (NodeKind.LT, "LT"),
        (NodeKind.GT, "GT"),
        (NodeKind.DEQ, "EQ"),
        (NodeKind.NEQ, "NE"),
        (NodeKind.MINUS, "SUB"),
        (NodeKind.MUL, "MUL"),
        (NodeKind.DIV, "DIV"),
        (NodeKind.MOD, "MOD"),
    ],
)
def test_binary_instruction(kind, instr):
    gen = ExplExpressionGenerator()
    gen.generate(op(kind, num(3), num(4)))
    assert gen.text().splitlines()[-1].startswith(instr + " ")
    assert gen.counter == 0


def test_global_identifier_reads_its_binding(symbols):
    sym = symbols.ginstall("x", symbols.tlookup("integer"), 1, None)
    gen = ExplExpressionGenerator(symbols)
    gen.generate(ASTNode(nodetype=NodeKind.ID, name="x", gentry=sym))
    assert gen.text() == f"MOV R0,[{sym.binding}]\n"


def test_address_of_global_consumes_flag(symbols):
    sym = symbols.ginstall("x", symbols.tlookup("integer"), 1, None)
    gen = ExplExpressionGenerator(symbols, isamp=True)
    gen.generate(ASTNode(nodetype=NodeKind.ID, name="x", gentry=sym))
    assert gen.text() == f"MOV R0,{sym.binding}\n"
    assert gen.isamp is False


def test_local_identifier_uses_frame_offset(symbols):
    integer = symbols.tlookup("integer")
    symbols.linstall("a", integer)
    symbols.linstall("b", integer)
    gen = ExplExpressionGenerator(symbols)
    assert gen.generate(ASTNode(nodetype=NodeKind.ID, name="b")) == 0
    text = gen.text()
    assert "MOV R1,BP" in text
    assert "MOV R0,2" in text
    assert gen.counter == 0


def test_parameter_identifier_below_frame(symbols):
    symbols.pinstall("p", symbols.tlookup("integer"))
    gen = ExplExpressionGenerator(symbols, fld=True)
    gen.generate(ASTNode(nodetype=NodeKind.ID, name="p"))
    lines = gen.text().splitlines()
    assert sum(line.startswith("SUB") for line in lines) == 2
    assert gen.fld is False
    assert gen.counter == 0


def test_field_of_global_record(symbols):
    integer = symbols.tlookup("integer")
    symbols.finstall(integer, "a")
    symbols.finstall(integer, "b")
    record = symbols.tinstall("pair", 0, symbols.fields)
    sym = symbols.ginstall("p", record, 1, None)
    node = ASTNode(
        nodetype=NodeKind.FIELD,
        name="p",
        gentry=sym,
        ptr2=ASTNode(nodetype=NodeKind.FIELD, name="b"),
    )
    gen = ExplExpressionGenerator(symbols)
    assert gen.generate(node) == 0
    lines = gen.text().splitlines()
    assert lines[0] == f"MOV R0,[{sym.binding}]"
    assert "MOV R1,2" in lines
    assert gen.counter == 0


def test_array_element(symbols):
    arr = symbols.ginstall("arr", symbols.tlookup("integer"), 10, None)
    node = ASTNode(
        nodetype=NodeKind.ARRAY,
        ptr1=ASTNode(nodetype=NodeKind.ID, name="arr", gentry=arr),
        ptr2=num(3),
    )
    gen = ExplExpressionGenerator(symbols)
    assert gen.generate(node) == 0
    assert f",{arr.binding}" in gen.text()
    assert gen.counter == 0


def test_not_uses_two_new_labels():
    gen = ExplExpressionGenerator()
    gen.generate(ASTNode(nodetype=NodeKind.NOT, ptr2=num(1)))
    text = gen.text()
    assert "L4:" in text and "L5:" in text
    assert gen.label == 5


def test_and_jumps_on_zero_or_jumps_on_nonzero():
    gen_and = ExplExpressionGenerator()
    gen_and.generate(op(NodeKind.AND, num(1), num(0)))
    gen_or = ExplExpressionGenerator()
    gen_or.generate(op(NodeKind.OR, num(1), num(0)))
    assert gen_and.text().splitlines()[2].startswith("JZ ")
    assert gen_or.text().splitlines()[2].startswith("JNZ ")
    assert gen_and.counter == 0 and gen_or.counter == 0


def test_nill_and_string_values():
    gen = ExplExpressionGenerator()
    gen.generate(ASTNode(nodetype=NodeKind.NILL))
    gen.generate(ASTNode(nodetype=NodeKind.STRVAL, name="hi"))
    assert gen.text().splitlines() == ["MOV R0,-1", 'MOV R1,"hi"']


def test_running_out_of_registers():
    tree = num(0)
    for value in range(1, 20):
        tree = op(NodeKind.PLUS, num(value), tree)
    with pytest.raises(CodegenError):
        ExplExpressionGenerator().generate(tree)


def test_unknown_node_type():
    with pytest.raises(CodegenError):
        ExplExpressionGenerator().generate(ASTNode(nodetype=NodeKind.BODY))


def test_undeclared_global_identifier():
    with pytest.raises(CodegenError):
        ExplExpressionGenerator().generate(ASTNode(nodetype=NodeKind.ID, name="nope"))