"""
Label field extraction core.

Normalizer -> Locator -> Extractors -> Assembler, as pure functions over
immutable contracts:
- geometric ordering only in the normalizer (stable, top-to-bottom)
- first match wins in the locator, one forward pass
- extractors read the location index and never re-locate

No OCR correction beyond the encoded O/0 postal-code tolerance, no ML.
"""

from .config import ExtractionConfig
from .locate import locate_fields
from .module import extract_from_document, extract_from_ocr_result, extract_label_fields
from .normalize import normalize_blocks

__all__ = [
    "ExtractionConfig",
    "normalize_blocks",
    "locate_fields",
    "extract_from_document",
    "extract_label_fields",
    "extract_from_ocr_result",
]
