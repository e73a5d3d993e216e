from __future__ import annotations

import logging
from typing import Iterable

from contracts.label import ExtractionResult, LabelField, NormalizedDocument
from contracts.ocr import OCRBlock, OCRResult

from .assemble import assemble_label_record
from .config import ExtractionConfig
from .extractors import EXTRACTORS
from .locate import locate_fields
from .normalize import normalize_blocks

logger = logging.getLogger(__name__)


def extract_from_document(
    document: NormalizedDocument, *, bar_code: str = "", config: ExtractionConfig | None = None
) -> ExtractionResult:
    """
    Locate and extract every field of an already normalized document.

    Each call starts from a fresh location pass; nothing is carried between calls.
    """

    config = config or ExtractionConfig()
    config.validate()

    locations = locate_fields(document)

    values: dict[LabelField, str] = {}
    descriptors: list[str] = []
    for label_field, extractor in EXTRACTORS:
        value = extractor(document, locations, config)
        values[label_field] = value
        descriptors.append(f"{label_field.value}: {value}")

    logger.info("Extracted fields: %s", descriptors)

    return ExtractionResult(
        document=document,
        locations=locations,
        record=assemble_label_record(values, bar_code),
        descriptors=descriptors,
    )


def extract_label_fields(
    blocks: Iterable[OCRBlock], *, bar_code: str = "", config: ExtractionConfig | None = None
) -> ExtractionResult:
    return extract_from_document(normalize_blocks(blocks), bar_code=bar_code, config=config)


def extract_from_ocr_result(
    ocr: OCRResult, *, bar_code: str = "", config: ExtractionConfig | None = None
) -> ExtractionResult:
    """
    Run extraction over a recognition result. A failed recognition is treated
    as a label with no text: every field comes back empty.
    """

    if not ocr.ok:
        logger.warning(
            "Text recognition failed (%s); extracting from empty input",
            ", ".join(e.code for e in ocr.errors) or "no error code",
        )
        return extract_label_fields([], bar_code=bar_code, config=config)
    return extract_label_fields(ocr.blocks, bar_code=bar_code, config=config)
