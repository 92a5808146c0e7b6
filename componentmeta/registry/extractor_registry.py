import os
from typing import Optional

from componentmeta.config import ExtractorConfig
from componentmeta.exceptions import UnsupportedDialectError
from componentmeta.extractors.react_extractor import ReactComponentExtractor

EXT_MAP = {
    "tsx": [".tsx", ".jsx", ".js", ".mjs", ".cjs"],
    "typescript": [".ts"],
}

INVERSE_EXTS = {ext: dialect for dialect, exts in EXT_MAP.items() for ext in exts}


def dialect_for_path(file_path: str) -> Optional[str]:
    return INVERSE_EXTS.get(os.path.splitext(file_path)[1].lower())


def get_extractor(dialect: str, config: Optional[ExtractorConfig] = None):
    lang = dialect.lower()
    if lang in ("tsx", "jsx", "javascript"):
        return ReactComponentExtractor("tsx", config)
    if lang in ("typescript", "ts"):
        return ReactComponentExtractor("typescript", config)
    raise UnsupportedDialectError(f"No extractor for dialect: {dialect}")
