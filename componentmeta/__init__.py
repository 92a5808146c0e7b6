from componentmeta.extractors.react_extractor import ReactComponentExtractor, extract_component_descriptor
from componentmeta.models import ComponentDescriptor, PropDescriptor, PropSource, TypeDescriptor, TypeKind

__all__ = [
    "ComponentDescriptor",
    "PropDescriptor",
    "PropSource",
    "ReactComponentExtractor",
    "TypeDescriptor",
    "TypeKind",
    "extract_component_descriptor",
]
