"""Normalization of TypeScript type annotations into ``TypeDescriptor`` values.

Every function here is pure: it reads a tree-sitter type node and the source
bytes it came from and never touches extractor state. Normalization of a
single object member is allowed to fail; the failure is logged and the member
is downgraded to the ``unknown`` sentinel so its siblings are still described.
"""

import re
from typing import List, Optional, Tuple

from componentmeta.extractors.tree_utils import first_named_child, get_text, has_child, string_value
from componentmeta.models import (
    UNKNOWN_DESCRIPTOR,
    UNKNOWN_TYPE,
    ShapeMember,
    TypeDescriptor,
    TypeKind,
    type_or_any,
)
from componentmeta.utils.log import get_logger

logger = get_logger("extractors.type_shapes")

TRANSPARENT_TYPES = {"parenthesized_type", "readonly_type"}
REFERENCE_TYPES = {"type_identifier", "nested_type_identifier", "generic_type"}
FUNCTION_TYPES = {"function_type", "constructor_type"}
LITERAL_KEYWORDS = {"null", "undefined"}

FUNCTION_DESCRIPTOR = TypeDescriptor(kind=TypeKind.FUNCTION, name="function")


def unwrap_type(node):
    while node is not None and node.type in TRANSPARENT_TYPES:
        node = first_named_child(node)
    return node


def annotation_type(type_annotation):
    """The type node inside a ``: T`` annotation."""
    if type_annotation is None:
        return None
    if type_annotation.type != "type_annotation":
        return type_annotation
    return first_named_child(type_annotation)


def reference_name(node, source: bytes) -> str:
    if node.type == "generic_type":
        return reference_name(node.child_by_field_name("name"), source)
    if node.type == "nested_type_identifier":
        return re.sub(r"\s+", "", get_text(node, source))
    if node.type == "type_identifier":
        return get_text(node, source)
    raise ValueError(f"not a type reference: {node.type}")


def primitive_keyword(node, source: bytes) -> str:
    if node.type == "predefined_type":
        return get_text(node, source).strip()
    if node.type == "literal_type":
        literal = first_named_child(node)
        if literal is not None and literal.type in LITERAL_KEYWORDS:
            return literal.type
        return "literal"
    kind = node.type
    if kind.startswith("type_"):
        kind = kind[len("type_"):]
    if kind.endswith("_type"):
        kind = kind[:-len("_type")]
    return kind.replace("_", "").lower()


def flatten_union(node) -> List[object]:
    # union_type is left-nested: a | b | c parses as ((a | b) | c)
    members = []
    for child in node.named_children:
        if child.type == "union_type":
            members.extend(flatten_union(child))
        elif child.type != "comment":
            members.append(child)
    return members


def union_member_tag(node, source: bytes) -> str:
    node = unwrap_type(node)
    if node.type == "array_type":
        return normalize_array(node, source).name
    if node.type in REFERENCE_TYPES:
        return reference_name(node, source)
    return primitive_keyword(node, source)


def normalize_array(node, source: bytes) -> TypeDescriptor:
    element = unwrap_type(first_named_child(node))
    if element is None:
        raise ValueError("array type without element type")

    shape = None
    if element.type == "object_type":
        element_type = "object"
        shape = object_shape(element, source)
    elif element.type in REFERENCE_TYPES:
        element_type = reference_name(element, source)
    elif element.type == "array_type":
        element_type = normalize_array(element, source).name
    elif element.type == "union_type":
        tags = [union_member_tag(m, source) for m in flatten_union(element)]
        element_type = f"({' | '.join(tags)})"
    else:
        element_type = primitive_keyword(element, source)

    return TypeDescriptor(
        kind=TypeKind.ARRAY,
        name=f"{element_type}[]",
        element_type=element_type,
        object_shape=shape,
    )


def normalize(node, source: bytes) -> TypeDescriptor:
    node = unwrap_type(node)
    if node is None:
        return UNKNOWN_DESCRIPTOR
    if node.type in FUNCTION_TYPES:
        return FUNCTION_DESCRIPTOR
    if node.type in REFERENCE_TYPES:
        return TypeDescriptor(kind=TypeKind.REFERENCE, name=reference_name(node, source))
    if node.type == "array_type":
        return normalize_array(node, source)
    if node.type == "union_type":
        tags = tuple(union_member_tag(m, source) for m in flatten_union(node))
        return TypeDescriptor(kind=TypeKind.UNION, name="union", union_of=tags)
    if node.type == "object_type":
        return TypeDescriptor(kind=TypeKind.OBJECT, name="object", object_shape=object_shape(node, source))

    keyword = primitive_keyword(node, source)
    kind = TypeKind.ANY if keyword == "any" else TypeKind.PRIMITIVE
    return TypeDescriptor(kind=kind, name=keyword)


def member_name(member, source: bytes) -> Optional[str]:
    name_node = member.child_by_field_name("name")
    if name_node is None:
        return None
    if name_node.type in ("property_identifier", "private_property_identifier"):
        return get_text(name_node, source)
    if name_node.type == "string":
        return string_value(name_node, source) or None
    return None


def is_optional_member(member) -> bool:
    return has_child(member, "?")


def member_type_descriptor(member, source: bytes) -> TypeDescriptor:
    if member.type == "method_signature":
        return FUNCTION_DESCRIPTOR
    return normalize(annotation_type(member.child_by_field_name("type")), source)


def _shape_member_type(member, source: bytes) -> Tuple[str, Optional[TypeDescriptor]]:
    descriptor = member_type_descriptor(member, source)
    if descriptor.kind == TypeKind.UNION:
        # one level shallower than a top-level prop: the union is flattened to text
        return " | ".join(descriptor.union_of), None
    if descriptor.has_details:
        return descriptor.name, descriptor
    return descriptor.name, None


def object_shape(node, source: bytes) -> Tuple[ShapeMember, ...]:
    members = []
    for member in node.named_children:
        if member.type not in ("property_signature", "method_signature"):
            continue
        name = member_name(member, source)
        if not name:
            continue
        try:
            type_name, details = _shape_member_type(member, source)
        except Exception:
            logger.warning("Error normalizing type of object member %r", name, exc_info=True)
            type_name, details = UNKNOWN_TYPE, None
        members.append(ShapeMember(
            name=name,
            type=type_or_any(type_name),
            optional=is_optional_member(member),
            type_details=details,
        ))
    return tuple(members)
