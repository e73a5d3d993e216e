"""
Canonical contracts at every stage boundary of the label scanner.

Recognition output (blocks, lines, barcodes) flows into the extraction core,
which produces a normalized document, a location index, a label record and
finally a validation outcome. Stage code should consume/produce these
contract objects, not ad-hoc dicts.
"""

from .label import (
    LOCATABLE_FIELDS,
    NOT_FOUND,
    ExtractionResult,
    LabelField,
    LabelRecord,
    Location,
    LocationIndex,
    NormalizedDocument,
    ValidationOutcome,
    ValidationStatus,
)
from .ocr import BarcodeResult, BBox, OCRBlock, OCRLine, OCRResult, OcrError

__all__ = [
    "BBox",
    "OCRLine",
    "OCRBlock",
    "OcrError",
    "OCRResult",
    "BarcodeResult",
    "LabelField",
    "LOCATABLE_FIELDS",
    "NormalizedDocument",
    "Location",
    "NOT_FOUND",
    "LocationIndex",
    "LabelRecord",
    "ExtractionResult",
    "ValidationStatus",
    "ValidationOutcome",
]
