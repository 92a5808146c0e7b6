import pytest

from componentmeta.extractors.react_extractor import ReactComponentExtractor
from componentmeta.extractors.tree_utils import walk
from componentmeta.extractors.type_shapes import annotation_type, normalize, object_shape
from componentmeta.models import TypeKind


def alias_value(type_source):
    source, tree = ReactComponentExtractor("typescript").parse(f"type T = {type_source};\n")
    alias = next(n for n in walk(tree.root_node) if n.type == "type_alias_declaration")
    return alias.child_by_field_name("value"), source


def describe(type_source):
    node, source = alias_value(type_source)
    return normalize(node, source)


@pytest.mark.parametrize("type_source, expected", [
    ("string", "string"),
    ("boolean", "boolean"),
    ("any", "any"),
    ("null", "null"),
    ("undefined", "undefined"),
    ("Foo", "Foo"),
    ("React.ReactNode", "React.ReactNode"),
    ("Promise<Array<number>>", "Promise"),
    ("(a: string) => void", "function"),
    ("(string)", "string"),
])
def test_scalar_names(type_source, expected):
    assert describe(type_source).name == expected


def test_literal_types_collapse():
    assert describe('"primary"').name == "literal"
    assert describe("42").name == "literal"


def test_array_variants():
    nested = describe("string[][]")
    assert nested.kind == TypeKind.ARRAY
    assert nested.name == "string[][]"
    assert nested.element_type == "string[]"

    union_elements = describe("(string | number)[]")
    assert union_elements.name == "(string | number)[]"
    assert union_elements.details_dict() == {"arrayOf": "(string | number)", "elementType": "(string | number)"}


def test_union_flattens_left_nesting():
    union = describe("string | number | null | Foo[]")
    assert union.kind == TypeKind.UNION
    assert union.union_of == ("string", "number", "null", "Foo[]")
    assert union.details_dict() == {"unionOf": ["string", "number", "null", "Foo[]"]}


def test_inline_object_becomes_shape():
    obj = describe('{ id: number; "data-test"?: string; onPick(value: string): void; kind: "a" | "b" }')
    assert obj.kind == TypeKind.OBJECT
    assert obj.name == "object"
    assert [m.to_dict() for m in obj.object_shape] == [
        {"name": "id", "type": "number", "optional": False},
        {"name": "data-test", "type": "string", "optional": True},
        {"name": "onPick", "type": "function", "optional": False},
        {"name": "kind", "type": "literal | literal", "optional": False},
    ]


def test_shape_member_unknown_becomes_any():
    node, source = alias_value("{ raw: unknown; ok: boolean }")
    shape = object_shape(node, source)
    assert [(m.name, m.type) for m in shape] == [("raw", "any"), ("ok", "boolean")]


def test_annotation_type_passes_bare_nodes_through():
    node, _ = alias_value("string")
    assert annotation_type(node) is node
    assert annotation_type(None) is None
