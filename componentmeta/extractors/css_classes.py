"""Harvesting of literal style-class tokens.

Four shapes are recognised: a string ``className`` attribute, a template
literal ``className`` attribute, calls to class-composition helpers such as
``cn("a b")`` and ``styles.<member>({ class: "a b" })`` calls. Interpolated
parts are never resolved.
"""

from typing import Iterator, List

from componentmeta.config import ExtractorConfig
from componentmeta.extractors.tree_utils import first_named_child, get_text, string_value, unescape, walk

UNRESOLVED_MARKER = "${"


def split_classes(text: str) -> List[str]:
    return [cls for cls in text.split() if UNRESOLVED_MARKER not in cls]


def template_text(node, source: bytes) -> str:
    # substitutions collapse to "${}" so glued tokens like w-${size} get dropped
    parts = []
    cursor = node.start_byte + 1
    for child in node.children:
        if child.type == "template_substitution":
            parts.append(unescape(source[cursor:child.start_byte].decode("utf-8", errors="replace")))
            parts.append("${}")
            cursor = child.end_byte
    parts.append(unescape(source[cursor:node.end_byte - 1].decode("utf-8", errors="replace")))
    return "".join(parts)


def literal_classes(node, source: bytes, cooked: bool = True) -> List[str]:
    if node is None:
        return []
    if node.type == "string":
        text = string_value(node, source)
        return split_classes(unescape(text) if cooked else text)
    if node.type == "template_string":
        return split_classes(template_text(node, source))
    return []


def attribute_classes(attribute, source: bytes, config: ExtractorConfig) -> List[str]:
    named = attribute.named_children
    if not named or named[0].type != "property_identifier":
        return []
    if get_text(named[0], source) != config.class_attribute or len(named) < 2:
        return []

    value = named[1]
    if value.type == "jsx_expression":
        return literal_classes(first_named_child(value), source)
    # JSX attribute strings carry no escape sequences
    return literal_classes(value, source, cooked=False)


def _object_class_values(obj, source: bytes) -> List[str]:
    classes = []
    for pair in obj.named_children:
        if pair.type != "pair":
            continue
        key = pair.child_by_field_name("key")
        if key is None:
            continue
        key_name = string_value(key, source) if key.type == "string" else get_text(key, source)
        value = pair.child_by_field_name("value")
        if key_name == "class" and value is not None and value.type == "string":
            classes.extend(split_classes(unescape(string_value(value, source))))
    return classes


def call_classes(call, source: bytes, config: ExtractorConfig) -> List[str]:
    fn = call.child_by_field_name("function")
    args = call.child_by_field_name("arguments")
    if fn is None or args is None or args.type != "arguments":
        return []

    if fn.type == "identifier":
        if get_text(fn, source) not in config.class_helpers:
            return []
        classes = []
        for arg in args.named_children:
            classes.extend(literal_classes(arg, source))
        return classes

    if fn.type == "member_expression":
        obj = fn.child_by_field_name("object")
        prop = fn.child_by_field_name("property")
        if obj is None or prop is None or obj.type != "identifier":
            return []
        if get_text(obj, source) != config.style_object:
            return []
        classes = [f"{config.style_object}.{get_text(prop, source)}()"]
        for arg in args.named_children:
            if arg.type == "object":
                classes.extend(_object_class_values(arg, source))
        return classes

    return []


def extract_css_classes(root, source: bytes, config: ExtractorConfig) -> Iterator[str]:
    for node in walk(root):
        if node.type == "jsx_attribute":
            yield from attribute_classes(node, source, config)
        elif node.type == "call_expression":
            yield from call_classes(node, source, config)
