from __future__ import annotations

from typing import Mapping

from contracts.label import LabelField, LabelRecord


def assemble_label_record(values: Mapping[LabelField, str], bar_code: str) -> LabelRecord:
    """Merge the text-derived field values with the externally decoded barcode."""
    F = LabelField
    return LabelRecord(
        product_type=values.get(F.PRODUCT_TYPE, ""),
        to_address=values.get(F.TO_ADDRESS, ""),
        dest_postal_code=values.get(F.DEST_POSTAL_CODE, ""),
        track_pin=values.get(F.TRACK_PIN, ""),
        bar_code=bar_code,
        from_address=values.get(F.FROM_ADDRESS, ""),
        product_dimension=values.get(F.PRODUCT_DIMENSION, ""),
        product_weight=values.get(F.PRODUCT_WEIGHT, ""),
        product_instruction=values.get(F.PRODUCT_INSTRUCTION, ""),
        reference=values.get(F.REFERENCE, ""),
    )
