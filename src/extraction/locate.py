from __future__ import annotations

import logging
from types import MappingProxyType

from contracts.label import LOCATABLE_FIELDS, NOT_FOUND, LabelField, Location, LocationIndex, NormalizedDocument

from .patterns import (
    FROM_ADDRESS_HEADER_RE,
    POSTAL_CODE_RE,
    PRODUCT_DIMENSION_RE,
    REFERENCE_HEADER_RE,
    TO_ADDRESS_HEADER_RE,
    TRACK_PIN_RE,
    WEIGHT_UNIT_TOKEN,
    find_product_instruction,
    find_product_type,
)

logger = logging.getLogger(__name__)


class _FirstMatchIndex:
    """Write-once builder: a field keeps the first location recorded for it."""

    def __init__(self) -> None:
        self._entries: dict[LabelField, Location] = {f: NOT_FOUND for f in LOCATABLE_FIELDS}

    def unset(self, label_field: LabelField) -> bool:
        return not self._entries[label_field].found

    def record(self, label_field: LabelField, block_index: int, line_index: int | None = None) -> None:
        if self.unset(label_field):
            self._entries[label_field] = Location(block_index=block_index, line_index=line_index)

    def freeze(self) -> LocationIndex:
        return LocationIndex(entries=MappingProxyType(dict(self._entries)))


def locate_fields(document: NormalizedDocument) -> LocationIndex:
    """
    One forward pass over the document recording where each field first matches.

    Scanning never stops early so later fields are found even when an earlier
    one never is. Postal code, track pin and dimension only match in
    single-line blocks.
    """

    index = _FirstMatchIndex()
    F = LabelField

    for bi, block in enumerate(document.blocks):
        single_line = len(block) == 1
        for li, line in enumerate(block):
            if single_line:
                if index.unset(F.DEST_POSTAL_CODE) and POSTAL_CODE_RE.search(line):
                    index.record(F.DEST_POSTAL_CODE, bi)
                elif index.unset(F.TRACK_PIN) and TRACK_PIN_RE.search(line):
                    index.record(F.TRACK_PIN, bi)
                elif index.unset(F.PRODUCT_DIMENSION) and PRODUCT_DIMENSION_RE.search(line):
                    index.record(F.PRODUCT_DIMENSION, bi)

            if index.unset(F.PRODUCT_TYPE) and find_product_type(line):
                index.record(F.PRODUCT_TYPE, bi)
            if index.unset(F.TO_ADDRESS) and TO_ADDRESS_HEADER_RE.search(line):
                index.record(F.TO_ADDRESS, bi, li)
            if index.unset(F.FROM_ADDRESS) and FROM_ADDRESS_HEADER_RE.search(line):
                index.record(F.FROM_ADDRESS, bi, li)
            if index.unset(F.PRODUCT_WEIGHT) and WEIGHT_UNIT_TOKEN in line:
                index.record(F.PRODUCT_WEIGHT, bi)
            if index.unset(F.PRODUCT_INSTRUCTION) and find_product_instruction(line):
                index.record(F.PRODUCT_INSTRUCTION, bi)
            if index.unset(F.REFERENCE) and REFERENCE_HEADER_RE.search(line):
                index.record(F.REFERENCE, bi)

    locations = index.freeze()
    logger.debug("Located fields: %s", locations.to_dict())
    return locations
