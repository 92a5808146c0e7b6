from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from componentmeta.models import ComponentDescriptor


class ComponentExtractor(ABC):
    """One component module in, one ``ComponentDescriptor`` out.

    ``extract`` is the pure entry point. The file-oriented methods keep the
    last descriptor so batch runs can write it out after processing.
    """

    descriptor: Optional[ComponentDescriptor] = None

    @abstractmethod
    def extract(self, code: str, file_path: Optional[str] = None) -> ComponentDescriptor:
        """Describe ``code``; raises ``SourceParseError`` when it does not parse."""

    @abstractmethod
    def process_file(self, file_path: str) -> None:
        pass

    def extract_all_components(self) -> List[Dict[str, Any]]:
        return [self.descriptor.to_dict()] if self.descriptor is not None else []

    @abstractmethod
    def write_to_file(self, output_path: str) -> None:
        pass
