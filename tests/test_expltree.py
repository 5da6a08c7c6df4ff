from xsmforge.expltree import ASTNode, NodeKind, tree_create


def test_leaf_node_fields():
    marker = object()
    node = tree_create(marker, NodeKind.NUM, None, 7, None, None, None, None)
    assert node.type is marker
    assert node.nodetype == NodeKind.NUM
    assert node.value == 7
    assert node.name is None
    assert node.gentry is None and node.lentry is None


def test_value_defaults_to_none():
    node = tree_create(None, NodeKind.ID, "x", None, None, None, None, None)
    assert node.value is None
    assert node.name == "x"


def test_children_are_linked():
    left = tree_create(None, NodeKind.NUM, None, 1, None, None, None, None)
    right = tree_create(None, NodeKind.NUM, None, 2, None, None, None, None)
    args = tree_create(None, NodeKind.ID, "a", None, None, None, None, None)
    node = tree_create(None, NodeKind.PLUS, None, None, args, left, right, None)
    assert node.ptr1 is left
    assert node.ptr2 is right
    assert node.ptr3 is None
    assert node.arglist is args


def test_default_node_kind_value():
    node = tree_create(None, NodeKind.DEFAULT, None, None, None, None, None, None)
    assert node.nodetype == 100
    assert NodeKind(node.nodetype) is NodeKind.DEFAULT


def test_nodes_compare_by_identity():
    a = ASTNode(nodetype=NodeKind.NUM, value=1)
    b = ASTNode(nodetype=NodeKind.NUM, value=1)
    assert a != b
    assert a == a