from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

UNKNOWN_TYPE = "unknown"
ANY_TYPE = "any"


def type_or_any(type_name: Optional[str]) -> str:
    return type_name if type_name and type_name != UNKNOWN_TYPE else ANY_TYPE


class TypeKind(str, Enum):
    PRIMITIVE = "primitive"
    FUNCTION = "function"
    REFERENCE = "reference"
    ARRAY = "array"
    UNION = "union"
    OBJECT = "object"
    ANY = "any"


class PropSource(str, Enum):
    """Which extraction pass produced a prop."""

    TYPE_ALIAS = "type-alias"
    INTERFACE = "interface"
    ARROW_FUNCTION_PARAM = "arrow-function-param"
    FUNCTION_PARAM = "function-param"
    PROP_TYPES = "prop-types"


class ImportKind(str, Enum):
    DEFAULT = "default"
    NAMED = "named"
    NAMESPACE = "namespace"


class ExportKind(str, Enum):
    DEFAULT = "default"
    NAMED = "named"


@dataclass(frozen=True)
class ShapeMember:
    """One member of an inline object type."""

    name: str
    type: str
    optional: bool = False
    type_details: Optional["TypeDescriptor"] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "type": type_or_any(self.type),
            "optional": self.optional,
        }
        if self.type_details is not None and self.type_details.has_details:
            data["typeDetails"] = self.type_details.details_dict()
        return data


@dataclass(frozen=True)
class TypeDescriptor:
    """Normalized shape of a type annotation.

    ``name`` is the rendered type string exposed on props (``"string"``,
    ``"React.ReactNode"``, ``"object[]"``, ``"union"``). The remaining fields
    are only set for the kinds that need them: ``element_type`` and optionally
    ``object_shape`` for arrays, ``object_shape`` for objects, ``union_of`` for
    unions.
    """

    kind: TypeKind
    name: str
    element_type: Optional[str] = None
    object_shape: Optional[Tuple[ShapeMember, ...]] = None
    union_of: Optional[Tuple[str, ...]] = None

    @property
    def has_details(self) -> bool:
        return self.kind in (TypeKind.ARRAY, TypeKind.UNION, TypeKind.OBJECT)

    def details_dict(self) -> Optional[Dict[str, Any]]:
        if self.kind == TypeKind.ARRAY:
            details = {"arrayOf": self.element_type, "elementType": self.element_type}
            if self.object_shape is not None:
                details["objectShape"] = [m.to_dict() for m in self.object_shape]
            return details
        if self.kind == TypeKind.UNION:
            return {"unionOf": list(self.union_of or ())}
        if self.kind == TypeKind.OBJECT:
            return {"objectShape": [m.to_dict() for m in self.object_shape or ()]}
        return None


UNKNOWN_DESCRIPTOR = TypeDescriptor(kind=TypeKind.ANY, name=UNKNOWN_TYPE)


@dataclass(frozen=True)
class PropDescriptor:
    name: str
    type: str
    source: PropSource
    optional: bool = False
    type_details: Optional[TypeDescriptor] = None
    validator: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "type": type_or_any(self.type),
            "typeDetails": self.type_details.details_dict() if self.type_details else None,
            "optional": self.optional,
            "source": self.source.value,
        }
        if self.validator is not None:
            data["validator"] = self.validator
        return data


@dataclass(frozen=True)
class ImportedName:
    type: ImportKind
    name: str
    imported_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "name": self.name, "importedName": self.imported_name}


@dataclass(frozen=True)
class ImportRecord:
    source: str
    imports: Tuple[ImportedName, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "imports": [i.to_dict() for i in self.imports]}


@dataclass(frozen=True)
class MethodRecord:
    name: str
    params: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "params": list(self.params)}


@dataclass(frozen=True)
class ComponentDescriptor:
    """Everything extracted from one component source unit."""

    name: Optional[str] = None
    props: Tuple[PropDescriptor, ...] = ()
    imports: Tuple[ImportRecord, ...] = ()
    dependencies: Tuple[str, ...] = ()
    css_classes: Tuple[str, ...] = ()
    jsx_elements: Tuple[str, ...] = ()
    methods: Tuple[MethodRecord, ...] = ()
    exports: Tuple[ExportKind, ...] = ()
    is_typescript: bool = False
    file_path: Optional[str] = None

    def prop(self, name: str) -> Optional[PropDescriptor]:
        for p in self.props:
            if p.name == name:
                return p
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "props": [p.to_dict() for p in self.props],
            "dependencies": list(self.dependencies),
            "imports": [i.to_dict() for i in self.imports],
            "cssClasses": list(self.css_classes),
            "isTypescript": self.is_typescript,
            "exports": [e.value for e in self.exports],
            "methods": [m.to_dict() for m in self.methods],
            "jsxElements": list(self.jsx_elements),
        }
        if self.file_path is not None:
            data["file_path"] = self.file_path
        return data


@dataclass
class DescriptorBuilder:
    """Mutable collector the extraction pipeline fills before freezing.

    Props are unique by name with the first insertion winning; css classes and
    jsx elements keep insertion order without duplicates.
    """

    name: Optional[str] = None
    props: List[PropDescriptor] = field(default_factory=list)
    imports: List[ImportRecord] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    css_classes: Dict[str, None] = field(default_factory=dict)
    jsx_elements: Dict[str, None] = field(default_factory=dict)
    methods: List[MethodRecord] = field(default_factory=list)
    exports: List[ExportKind] = field(default_factory=list)
    is_typescript: bool = False

    def has_prop(self, name: str) -> bool:
        return any(p.name == name for p in self.props)

    def add_prop(self, prop: PropDescriptor) -> bool:
        if not prop.name or self.has_prop(prop.name):
            return False
        self.props.append(prop)
        return True

    def add_css_class(self, token: str):
        if token:
            self.css_classes.setdefault(token, None)

    def add_jsx_element(self, tag: str):
        if tag:
            self.jsx_elements.setdefault(tag, None)

    def build(self, file_path: Optional[str] = None) -> ComponentDescriptor:
        return ComponentDescriptor(
            name=self.name,
            props=tuple(self.props),
            imports=tuple(self.imports),
            dependencies=tuple(self.dependencies),
            css_classes=tuple(self.css_classes),
            jsx_elements=tuple(self.jsx_elements),
            methods=tuple(self.methods),
            exports=tuple(self.exports),
            is_typescript=self.is_typescript,
            file_path=file_path,
        )
