from __future__ import annotations

from typing import Callable

from contracts.label import LabelField, LocationIndex, NormalizedDocument

from .config import ExtractionConfig
from .patterns import (
    POSTAL_CODE_RE,
    REFERENCE_HEADER_RE,
    WEIGHT_VALUE_RE,
    find_postal_code,
    find_product_instruction,
    find_product_type,
    is_package_metadata,
)

ADDRESS_SEPARATOR = ", "


def extract_product_type(doc: NormalizedDocument, locations: LocationIndex, config: ExtractionConfig) -> str:
    bi = locations.block_index(LabelField.PRODUCT_TYPE)
    if bi < 0:
        return ""
    for line in doc.block(bi):
        term = find_product_type(line)
        if term:
            return term
    return ""


def extract_product_instruction(doc: NormalizedDocument, locations: LocationIndex, config: ExtractionConfig) -> str:
    bi = locations.block_index(LabelField.PRODUCT_INSTRUCTION)
    if bi < 0:
        return ""
    for line in doc.block(bi):
        term = find_product_instruction(line)
        if term:
            return term
    return ""


def extract_dest_postal_code(doc: NormalizedDocument, locations: LocationIndex, config: ExtractionConfig) -> str:
    bi = locations.block_index(LabelField.DEST_POSTAL_CODE)
    if bi < 0:
        return ""
    return find_postal_code(doc.block(bi)[0])


def extract_product_dimension(doc: NormalizedDocument, locations: LocationIndex, config: ExtractionConfig) -> str:
    bi = locations.block_index(LabelField.PRODUCT_DIMENSION)
    if bi < 0:
        return ""
    return doc.block(bi)[0]


def extract_track_pin(doc: NormalizedDocument, locations: LocationIndex, config: ExtractionConfig) -> str:
    bi = locations.block_index(LabelField.TRACK_PIN)
    if bi < 0:
        return ""
    line = doc.block(bi)[0]
    # "PIN/NIP: 1234 5678 ..." variant near the bottom of the label. The text
    # after the last colon is stripped, so the space after the colon is dropped.
    if ":" in line:
        return line.rpartition(":")[2].strip()
    return line


def extract_reference(doc: NormalizedDocument, locations: LocationIndex, config: ExtractionConfig) -> str:
    bi = locations.block_index(LabelField.REFERENCE)
    if bi < 0:
        return ""
    for line in doc.block(bi):
        if REFERENCE_HEADER_RE.search(line):
            # Stripped like the track pin: "Ref./Réf.: A-19" gives "A-19".
            return line.rpartition(":")[2].strip()
    return ""


def _header_anchored_span(
    doc: NormalizedDocument,
    locations: LocationIndex,
    header: LabelField,
    *,
    stop_block: Callable[[tuple[str, ...]], bool] | None = None,
    skip_block: Callable[[tuple[str, ...]], bool] | None = None,
) -> str:
    loc = locations.get(header)
    if not loc.found:
        return ""

    header_block = doc.block(loc.block_index)
    line_index = loc.line_index if loc.line_index is not None else 0

    # Address fragments sharing the header's block.
    fragments: list[str] = list(header_block[line_index + 1 :])

    # Whole blocks at a time until the accumulated address holds a postal code.
    next_index = loc.block_index + 1
    while next_index < len(doc) and not POSTAL_CODE_RE.search(ADDRESS_SEPARATOR.join(fragments)):
        block = doc.block(next_index)
        next_index += 1
        if stop_block is not None and stop_block(block):
            break
        if skip_block is not None and skip_block(block):
            continue
        fragments.extend(block)

    return ADDRESS_SEPARATOR.join(fragments)


def _has_instruction_line(block: tuple[str, ...]) -> bool:
    return any(find_product_instruction(line) for line in block)


def _has_package_metadata(block: tuple[str, ...]) -> bool:
    return any(is_package_metadata(line) for line in block)


def extract_to_address(doc: NormalizedDocument, locations: LocationIndex, config: ExtractionConfig) -> str:
    # The recipient address is followed directly by instruction tags (e.g. "18+ SIGNATURE").
    return _header_anchored_span(doc, locations, LabelField.TO_ADDRESS, stop_block=_has_instruction_line)


def extract_from_address(doc: NormalizedDocument, locations: LocationIndex, config: ExtractionConfig) -> str:
    # Dimension, weight and MANIFEST blocks are interleaved between the sender header and its address.
    return _header_anchored_span(doc, locations, LabelField.FROM_ADDRESS, skip_block=_has_package_metadata)


def extract_product_weight(doc: NormalizedDocument, locations: LocationIndex, config: ExtractionConfig) -> str:
    header_index = locations.block_index(LabelField.PRODUCT_WEIGHT)
    if header_index < 0:
        return ""

    m = WEIGHT_VALUE_RE.search(doc.block(header_index)[0])
    value = m.group(0) if m else ""

    if not value:
        excluded = {
            locations.block_index(LabelField.PRODUCT_DIMENSION),
            locations.block_index(LabelField.FROM_ADDRESS),
        }
        lowest = max(0, header_index - config.weight_lookback_blocks)
        for bi in range(header_index - 1, lowest - 1, -1):
            if bi in excluded:
                continue
            for line in doc.block(bi):
                m = WEIGHT_VALUE_RE.search(line)
                if m:
                    value = m.group(0)
                    break
            if value:
                break

    return value + config.weight_unit_suffix if value else ""


Extractor = Callable[[NormalizedDocument, LocationIndex, ExtractionConfig], str]

# Extraction (and descriptor) order.
EXTRACTORS: tuple[tuple[LabelField, Extractor], ...] = (
    (LabelField.PRODUCT_TYPE, extract_product_type),
    (LabelField.TO_ADDRESS, extract_to_address),
    (LabelField.DEST_POSTAL_CODE, extract_dest_postal_code),
    (LabelField.TRACK_PIN, extract_track_pin),
    (LabelField.FROM_ADDRESS, extract_from_address),
    (LabelField.PRODUCT_DIMENSION, extract_product_dimension),
    (LabelField.PRODUCT_WEIGHT, extract_product_weight),
    (LabelField.PRODUCT_INSTRUCTION, extract_product_instruction),
    (LabelField.REFERENCE, extract_reference),
)
