import json
import os
import re
from typing import Iterator, List, Optional, Tuple

import chardet
import tree_sitter_typescript
from tree_sitter import Language, Parser

from componentmeta.base.component_extractor import ComponentExtractor
from componentmeta.config import ExtractorConfig, load_config
from componentmeta.exceptions import SourceParseError, UnsupportedDialectError
from componentmeta.extractors.css_classes import extract_css_classes
from componentmeta.extractors.tree_utils import (
    first_error,
    first_named_child,
    get_text,
    has_child,
    string_value,
    top_level_statements,
    walk,
)
from componentmeta.extractors.type_shapes import (
    is_optional_member,
    member_name,
    member_type_descriptor,
    unwrap_type,
)
from componentmeta.models import (
    UNKNOWN_DESCRIPTOR,
    ComponentDescriptor,
    DescriptorBuilder,
    ExportKind,
    ImportedName,
    ImportKind,
    ImportRecord,
    MethodRecord,
    PropDescriptor,
    PropSource,
    type_or_any,
)
from componentmeta.utils.log import get_logger

logger = get_logger("extractors.react")

LANGUAGE_LOADERS = {
    "tsx": tree_sitter_typescript.language_tsx,
    "typescript": tree_sitter_typescript.language_typescript,
}
_LANGUAGES = {}

FUNCTION_DECLARATIONS = ("function_declaration", "generator_function_declaration")
VARIABLE_DECLARATIONS = ("lexical_declaration", "variable_declaration")
ANONYMOUS_FUNCTIONS = ("function_expression", "function", "arrow_function")
FIELD_DEFINITIONS = ("public_field_definition", "field_definition")
JSX_ELEMENTS = ("jsx_element", "jsx_self_closing_element")
PARAMETERS = ("required_parameter", "optional_parameter")


def get_language(dialect: str) -> Language:
    if dialect not in LANGUAGE_LOADERS:
        raise UnsupportedDialectError(f"No grammar for dialect: {dialect}")
    if dialect not in _LANGUAGES:
        _LANGUAGES[dialect] = Language(LANGUAGE_LOADERS[dialect]())
    return _LANGUAGES[dialect]


def read_source(file_path: str) -> str:
    with open(file_path, "rb") as f:
        raw = f.read()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        guess = chardet.detect(raw)
        encoding = guess.get("encoding") or "utf-8"
        return raw.decode(encoding, errors="replace")


def relpath_from_root(file_path: str) -> str:
    root = os.environ.get("ROOT_DIR", "")
    if root:
        return os.path.relpath(os.path.abspath(file_path), os.path.abspath(root)).replace("\\", "/")
    return file_path.replace("\\", "/")


class ReactComponentExtractor(ComponentExtractor):
    """Builds a ``ComponentDescriptor`` from the source of one UI component.

    Each fact category is collected by its own pass over the syntax tree.
    Passes write into a fresh ``DescriptorBuilder`` per call, so an extractor
    instance can be reused for any number of sources.
    """

    def __init__(self, dialect: str = "tsx", config: Optional[ExtractorConfig] = None):
        self.dialect = dialect
        self.language = get_language(dialect)
        self.config = config or load_config()
        self.descriptor: Optional[ComponentDescriptor] = None

    # ------------- Parsing -------------

    def parse(self, code: str):
        source = code.encode("utf-8")
        tree = Parser(self.language).parse(source)
        if tree.root_node.has_error:
            bad = first_error(tree.root_node)
            line, column = (bad.start_point[0] + 1, bad.start_point[1] + 1) if bad else (0, 0)
            raise SourceParseError("Unable to parse component source", line, column)
        return source, tree

    def extract(self, code: str, file_path: Optional[str] = None) -> ComponentDescriptor:
        source, tree = self.parse(code)
        root = tree.root_node
        builder = DescriptorBuilder()

        self.collect_imports(root, source, builder)
        for token in extract_css_classes(root, source, self.config):
            builder.add_css_class(token)
        self.resolve_identity(root, source, builder)

        # declared contracts first so they win the name dedup
        self.collect_declared_props(root, source, builder)
        self.collect_arrow_param_props(root, source, builder)
        self.collect_function_param_props(root, source, builder)
        self.collect_prop_types(root, source, builder)

        self.collect_jsx_elements(root, source, builder)
        self.collect_methods(root, source, builder)
        self.collect_anonymous_arrow_props(root, source, builder)
        return builder.build(file_path)

    # ------------- ComponentExtractor API -------------

    def process_file(self, file_path: str):
        code = read_source(file_path)
        self.descriptor = self.extract(code, relpath_from_root(file_path))

    def write_to_file(self, output_path: str):
        if self.descriptor is None:
            raise RuntimeError("process_file must succeed before write_to_file")
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.descriptor.to_dict(), f, indent=2, ensure_ascii=False)

    # ------------- Imports -------------

    def collect_imports(self, root, source: bytes, builder: DescriptorBuilder):
        for node in root.named_children:
            if node.type != "import_statement":
                continue
            source_node = node.child_by_field_name("source")
            if source_node is None:
                continue
            module = string_value(source_node, source)
            builder.dependencies.append(module)
            builder.imports.append(ImportRecord(source=module, imports=tuple(self._import_specifiers(node, source))))

    def _import_specifiers(self, node, source: bytes) -> Iterator[ImportedName]:
        clause = next((c for c in node.named_children if c.type == "import_clause"), None)
        if clause is None:
            return
        for part in clause.named_children:
            if part.type == "identifier":
                name = get_text(part, source)
                yield ImportedName(type=ImportKind.DEFAULT, name=name, imported_name=name)
            elif part.type == "namespace_import":
                local = first_named_child(part)
                if local is not None:
                    name = get_text(local, source)
                    yield ImportedName(type=ImportKind.NAMESPACE, name=name, imported_name=name)
            elif part.type == "named_imports":
                for spec in part.named_children:
                    if spec.type != "import_specifier":
                        continue
                    imported = self._binding_name(spec.child_by_field_name("name"), source)
                    alias = spec.child_by_field_name("alias")
                    local = get_text(alias, source) if alias is not None else imported
                    yield ImportedName(type=ImportKind.NAMED, name=local, imported_name=imported)

    def _binding_name(self, node, source: bytes) -> str:
        return string_value(node, source) if node.type == "string" else get_text(node, source)

    # ------------- Identity -------------

    def resolve_identity(self, root, source: bytes, builder: DescriptorBuilder):
        default_name = None
        named_name = None
        for node in root.named_children:
            if node.type != "export_statement":
                continue
            if has_child(node, "default"):
                matched, name = self._default_export(node, source)
                if matched:
                    builder.exports.append(ExportKind.DEFAULT)
                    default_name = default_name or name
                continue
            declaration = node.child_by_field_name("declaration")
            if declaration is not None and declaration.type in FUNCTION_DECLARATIONS:
                builder.exports.append(ExportKind.NAMED)
                # last named function export wins
                named_name = self._declared_name(declaration, source) or named_name

        builder.name = default_name or named_name or self._capitalized_arrow_binding(root, source)

    def _default_export(self, node, source: bytes) -> Tuple[bool, Optional[str]]:
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            if declaration.type in FUNCTION_DECLARATIONS + ("class_declaration",):
                return True, self._declared_name(declaration, source)
            return False, None
        value = node.child_by_field_name("value")
        if value is None:
            return False, None
        if value.type == "identifier":
            return True, get_text(value, source)
        if value.type in ANONYMOUS_FUNCTIONS:
            return True, self._declared_name(value, source)
        return False, None

    def _declared_name(self, node, source: bytes) -> Optional[str]:
        name_node = node.child_by_field_name("name")
        return get_text(name_node, source) if name_node is not None else None

    def _arrow_bindings(self, root, source: bytes) -> Iterator[Tuple[str, object]]:
        for statement, _ in top_level_statements(root):
            if statement.type not in VARIABLE_DECLARATIONS:
                continue
            for declarator in statement.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                value = declarator.child_by_field_name("value")
                if name_node is None or value is None or name_node.type != "identifier":
                    continue
                if value.type == "arrow_function":
                    yield get_text(name_node, source), value

    def _capitalized_arrow_binding(self, root, source: bytes) -> Optional[str]:
        for name, _ in self._arrow_bindings(root, source):
            if name[:1].isupper():
                return name
        return None

    # ------------- Declared props -------------

    def collect_declared_props(self, root, source: bytes, builder: DescriptorBuilder):
        for statement, _ in top_level_statements(root):
            if statement.type == "type_alias_declaration":
                name = self._declared_name(statement, source) or ""
                if not self.config.is_alias_contract(name):
                    continue
                builder.is_typescript = True
                for body in self._contract_bodies(statement.child_by_field_name("value")):
                    self._add_member_props(body, source, builder, PropSource.TYPE_ALIAS)
            elif statement.type == "interface_declaration":
                name = self._declared_name(statement, source) or ""
                if not self.config.is_interface_contract(name):
                    continue
                builder.is_typescript = True
                body = statement.child_by_field_name("body")
                if body is not None:
                    self._add_member_props(body, source, builder, PropSource.INTERFACE)

    def _contract_bodies(self, value) -> List[object]:
        value = unwrap_type(value)
        if value is None:
            return []
        if value.type == "object_type":
            return [value]
        if value.type == "intersection_type":
            bodies = []
            for operand in value.named_children:
                bodies.extend(self._contract_bodies(operand))
            return bodies
        return []

    def _add_member_props(self, body, source: bytes, builder: DescriptorBuilder, prop_source: PropSource):
        for member in body.named_children:
            if member.type not in ("property_signature", "method_signature"):
                continue
            name = member_name(member, source)
            if not name:
                continue
            try:
                descriptor = member_type_descriptor(member, source)
            except Exception:
                logger.warning("Error parsing type for member %r", name, exc_info=True)
                descriptor = UNKNOWN_DESCRIPTOR
            builder.add_prop(PropDescriptor(
                name=name,
                type=type_or_any(descriptor.name),
                type_details=descriptor if descriptor.has_details else None,
                optional=is_optional_member(member),
                source=prop_source,
            ))

    # ------------- Runtime props -------------

    def _parameters(self, fn) -> List[object]:
        single = fn.child_by_field_name("parameter")
        if single is not None:
            return [single]
        params = fn.child_by_field_name("parameters")
        if params is None:
            return []
        return [p for p in params.named_children if p.type in PARAMETERS or p.type == "identifier"]

    def _param_pattern(self, param):
        if param.type in PARAMETERS:
            return param.child_by_field_name("pattern")
        return param

    def _destructured_names(self, pattern, source: bytes) -> Iterator[str]:
        for prop in pattern.named_children:
            if prop.type == "shorthand_property_identifier_pattern":
                yield get_text(prop, source)
            elif prop.type == "pair_pattern":
                key = prop.child_by_field_name("key")
                if key is not None and key.type in ("property_identifier", "string"):
                    yield self._binding_name(key, source)
            elif prop.type == "object_assignment_pattern":
                left = prop.child_by_field_name("left")
                if left is not None and left.type == "shorthand_property_identifier_pattern":
                    yield get_text(left, source)

    def _add_destructured(self, fn, source: bytes, builder: DescriptorBuilder, prop_source: PropSource):
        for param in self._parameters(fn):
            pattern = self._param_pattern(param)
            if pattern is None or pattern.type != "object_pattern":
                continue
            for name in self._destructured_names(pattern, source):
                builder.add_prop(PropDescriptor(name=name, type="destructured", optional=True, source=prop_source))

    def collect_arrow_param_props(self, root, source: bytes, builder: DescriptorBuilder):
        if builder.name is None:
            return
        for name, arrow in self._arrow_bindings(root, source):
            if name == builder.name:
                self._add_destructured(arrow, source, builder, PropSource.ARROW_FUNCTION_PARAM)

    def collect_function_param_props(self, root, source: bytes, builder: DescriptorBuilder):
        if builder.name is None:
            return
        for statement, _ in top_level_statements(root):
            if statement.type not in FUNCTION_DECLARATIONS:
                continue
            if self._declared_name(statement, source) != builder.name:
                continue
            for param in self._parameters(statement):
                pattern = self._param_pattern(param)
                if pattern is None:
                    continue
                if pattern.type == "identifier":
                    typed = param.type in PARAMETERS and param.child_by_field_name("type") is not None
                    builder.add_prop(PropDescriptor(
                        name=get_text(pattern, source),
                        type="typed" if typed else "untyped",
                        optional=False,
                        source=PropSource.FUNCTION_PARAM,
                    ))
                elif pattern.type == "object_pattern":
                    for name in self._destructured_names(pattern, source):
                        builder.add_prop(PropDescriptor(
                            name=name, type="destructured", optional=True, source=PropSource.FUNCTION_PARAM,
                        ))

    def collect_prop_types(self, root, source: bytes, builder: DescriptorBuilder):
        for node in walk(root):
            if node.type in FIELD_DEFINITIONS:
                name = node.child_by_field_name("name")
                value = node.child_by_field_name("value")
            elif node.type == "assignment_expression":
                left = node.child_by_field_name("left")
                if left is None or left.type != "member_expression":
                    continue
                name = left.child_by_field_name("property")
                value = node.child_by_field_name("right")
            else:
                continue
            if name is None or value is None or value.type != "object":
                continue
            if get_text(name, source) == "propTypes":
                self._add_validators(value, source, builder)

    def _add_validators(self, obj, source: bytes, builder: DescriptorBuilder):
        for entry in obj.named_children:
            if entry.type == "pair":
                key = entry.child_by_field_name("key")
                if key is None or key.type not in ("property_identifier", "string"):
                    continue
                name = self._binding_name(key, source)
                value = entry.child_by_field_name("value")
                validator = "unknown"
                if value is not None and value.type == "member_expression":
                    prop = value.child_by_field_name("property")
                    if prop is not None:
                        validator = get_text(prop, source)
            elif entry.type == "shorthand_property_identifier":
                name = get_text(entry, source)
                validator = "unknown"
            else:
                continue
            builder.add_prop(PropDescriptor(
                name=name, type="prop-type", optional=True, source=PropSource.PROP_TYPES, validator=validator,
            ))

    def _returns_jsx(self, fn) -> bool:
        body = self._unparenthesize(fn.child_by_field_name("body"))
        if body is None:
            return False
        if body.type in JSX_ELEMENTS:
            return True
        if body.type != "statement_block":
            return False
        for statement in body.named_children:
            if statement.type == "return_statement":
                value = self._unparenthesize(first_named_child(statement))
                if value is not None and value.type in JSX_ELEMENTS:
                    return True
        return False

    def _unparenthesize(self, node):
        while node is not None and node.type == "parenthesized_expression":
            node = first_named_child(node)
        return node

    def collect_anonymous_arrow_props(self, root, source: bytes, builder: DescriptorBuilder):
        for node in walk(root):
            if builder.props:
                return
            if node.type == "arrow_function" and self._returns_jsx(node):
                self._add_destructured(node, source, builder, PropSource.ARROW_FUNCTION_PARAM)

    # ------------- JSX and methods -------------

    def collect_jsx_elements(self, root, source: bytes, builder: DescriptorBuilder):
        for node in walk(root):
            if node.type == "jsx_element":
                opening = node.child_by_field_name("open_tag") or first_named_child(node)
            elif node.type == "jsx_self_closing_element":
                opening = node
            else:
                continue
            name = opening.child_by_field_name("name") if opening is not None else None
            if name is not None:
                builder.add_jsx_element(re.sub(r"\s+", "", get_text(name, source)))

    def collect_methods(self, root, source: bytes, builder: DescriptorBuilder):
        for node in walk(root):
            if node.type != "method_definition" or node.parent is None or node.parent.type != "class_body":
                continue
            if has_child(node, "get") or has_child(node, "set"):
                continue
            name_node = node.child_by_field_name("name")
            if name_node is None:
                continue
            name = get_text(name_node, source)
            if name == "constructor":
                continue
            params = []
            for param in self._parameters(node):
                pattern = self._param_pattern(param)
                is_named = pattern is not None and pattern.type == "identifier"
                params.append(get_text(pattern, source) if is_named else "anonymous")
            builder.methods.append(MethodRecord(name=name, params=tuple(params)))


def extract_component_descriptor(
    code: str, dialect: str = "tsx", config: Optional[ExtractorConfig] = None
) -> Optional[ComponentDescriptor]:
    """Describe one component module, or return ``None`` if it does not parse."""
    extractor = ReactComponentExtractor(dialect, config)
    try:
        return extractor.extract(code)
    except SourceParseError as e:
        logger.warning("Failed to parse component source: %s", e)
        return None
