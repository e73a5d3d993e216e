from __future__ import annotations

import re

# Closed vocabularies; match order is not a tie-break.
PRODUCT_TYPES: tuple[str, ...] = ("Priority", "Regular Parcel", "Xpresspost", "Expedited Parcel")

PRODUCT_INSTRUCTIONS: tuple[str, ...] = (
    "SIGNATURE",
    "18+ SIGNATURE",
    "19+ SIGNATURE",
    "21+ SIGNATURE",
    "CARD FOR PICKUP",
    "DELIVER TO PO",
    "LEAVE AT DOOR",
    "DO NOT SAFE DROP",
)

# Canadian postal code. The letter O is accepted where a digit belongs (OCR
# reads 0 as O); the reverse is not accepted.
POSTAL_CODE_RE = re.compile(r"[a-zA-Z][O0-9][a-zA-Z][ \-]?[O0-9][a-zA-Z][O0-9]")

TRACK_PIN_RE = re.compile(r"\d{4} \d{4} \d{4} \d{4}")

# LxWxH with optional decimals, optional single space before the unit.
PRODUCT_DIMENSION_RE = re.compile(r"\d+(?:\.\d+)?x\d+(?:\.\d+)?x\d+(?:\.\d+)?\s?cm")

TO_ADDRESS_HEADER_RE = re.compile(r"TO.*[AÀÅ]", re.IGNORECASE)
FROM_ADDRESS_HEADER_RE = re.compile(r"FROM.*DE", re.IGNORECASE)
REFERENCE_HEADER_RE = re.compile(r"Ref.*R[eé]f", re.IGNORECASE)

WEIGHT_UNIT_TOKEN = "KG"
WEIGHT_VALUE_RE = re.compile(r"\d+\.\d+")

MANIFEST_TOKEN = "MANIFEST"


def contains_postal_code(text: str) -> bool:
    """Live-preview trigger: does the text hold a postal-code-shaped substring?"""
    return POSTAL_CODE_RE.search(text) is not None


def find_postal_code(text: str) -> str:
    m = POSTAL_CODE_RE.search(text)
    return m.group(0) if m else ""


def find_product_type(line: str) -> str:
    for term in PRODUCT_TYPES:
        if term in line:
            return term
    return ""


def find_product_instruction(line: str) -> str:
    folded = line.casefold()
    for term in PRODUCT_INSTRUCTIONS:
        if folded == term.casefold():
            return term
    return ""


def is_package_metadata(line: str) -> bool:
    """Dimension, weight or manifest text printed between the sender header and address."""
    return (
        PRODUCT_DIMENSION_RE.search(line) is not None
        or WEIGHT_UNIT_TOKEN in line
        or WEIGHT_VALUE_RE.search(line) is not None
        or MANIFEST_TOKEN.casefold() in line.casefold()
    )
