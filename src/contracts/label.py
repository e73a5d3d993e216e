from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class LabelField(str, Enum):
    """External field names, in record order."""

    PRODUCT_TYPE = "productType"
    TO_ADDRESS = "toAddress"
    DEST_POSTAL_CODE = "destPostalCode"
    TRACK_PIN = "trackPin"
    BAR_CODE = "barCode"
    FROM_ADDRESS = "fromAddress"
    PRODUCT_DIMENSION = "productDimension"
    PRODUCT_WEIGHT = "productWeight"
    PRODUCT_INSTRUCTION = "productInstruction"
    REFERENCE = "reference"


# Every field except the barcode is located from text.
LOCATABLE_FIELDS: tuple[LabelField, ...] = tuple(f for f in LabelField if f is not LabelField.BAR_CODE)


@dataclass(frozen=True, slots=True)
class NormalizedDocument:
    """
    Blocks ordered top-to-bottom, each an ordered tuple of line strings.
    """

    blocks: tuple[tuple[str, ...], ...] = ()

    def __len__(self) -> int:
        return len(self.blocks)

    def block(self, index: int) -> tuple[str, ...]:
        return self.blocks[index]

    def to_dict(self) -> dict[str, Any]:
        return {"blocks": [list(b) for b in self.blocks]}


@dataclass(frozen=True, slots=True)
class Location:
    block_index: int = -1
    line_index: int | None = None

    @property
    def found(self) -> bool:
        return self.block_index >= 0

    def to_dict(self) -> dict[str, Any]:
        return {"block_index": self.block_index, "line_index": self.line_index}


NOT_FOUND = Location()


@dataclass(frozen=True, slots=True)
class LocationIndex:
    """
    Where each locatable field's pattern first matched. Produced once by the
    locator; extractors only read it.
    """

    entries: Mapping[LabelField, Location]

    def __post_init__(self) -> None:
        missing = [f.value for f in LOCATABLE_FIELDS if f not in self.entries]
        if missing:
            raise ValueError(f"LocationIndex is missing entries for: {', '.join(missing)}")
        if LabelField.BAR_CODE in self.entries:
            raise ValueError("barCode is not locatable from text")

    def get(self, label_field: LabelField) -> Location:
        return self.entries[label_field]

    def block_index(self, label_field: LabelField) -> int:
        return self.entries[label_field].block_index

    def to_dict(self) -> dict[str, Any]:
        return {f.value: self.entries[f].to_dict() for f in LOCATABLE_FIELDS}


@dataclass(frozen=True, slots=True)
class LabelRecord:
    product_type: str = ""
    to_address: str = ""
    dest_postal_code: str = ""
    track_pin: str = ""
    bar_code: str = ""
    from_address: str = ""
    product_dimension: str = ""
    product_weight: str = ""
    product_instruction: str = ""
    reference: str = ""

    def value(self, label_field: LabelField) -> str:
        return getattr(self, _ATTR_BY_FIELD[label_field])

    def to_dict(self) -> dict[str, str]:
        return {f.value: self.value(f) for f in LabelField}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "LabelRecord":
        return LabelRecord(**{_ATTR_BY_FIELD[f]: str(d.get(f.value) or "") for f in LabelField})


_ATTR_BY_FIELD: dict[LabelField, str] = {
    LabelField.PRODUCT_TYPE: "product_type",
    LabelField.TO_ADDRESS: "to_address",
    LabelField.DEST_POSTAL_CODE: "dest_postal_code",
    LabelField.TRACK_PIN: "track_pin",
    LabelField.BAR_CODE: "bar_code",
    LabelField.FROM_ADDRESS: "from_address",
    LabelField.PRODUCT_DIMENSION: "product_dimension",
    LabelField.PRODUCT_WEIGHT: "product_weight",
    LabelField.PRODUCT_INSTRUCTION: "product_instruction",
    LabelField.REFERENCE: "reference",
}


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    document: NormalizedDocument
    locations: LocationIndex
    record: LabelRecord
    # "fieldName: value" per extracted field, in extraction order.
    descriptors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "document": self.document.to_dict(),
            "locations": self.locations.to_dict(),
            "record": self.record.to_dict(),
            "descriptors": list(self.descriptors),
        }


class ValidationStatus(str, Enum):
    COMPLETE = "COMPLETE"
    INCOMPLETE = "INCOMPLETE"


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """
    COMPLETE carries the serialized record; INCOMPLETE carries only the
    ordered names of the failing critical fields.
    """

    status: ValidationStatus
    serialized_record: str | None
    missing_fields: list[str]

    @staticmethod
    def valid(serialized_record: str) -> "ValidationOutcome":
        return ValidationOutcome(status=ValidationStatus.COMPLETE, serialized_record=serialized_record, missing_fields=[])

    @staticmethod
    def invalid(missing_fields: list[str]) -> "ValidationOutcome":
        if not missing_fields:
            raise ValueError("an INCOMPLETE outcome needs at least one missing field")
        return ValidationOutcome(status=ValidationStatus.INCOMPLETE, serialized_record=None, missing_fields=list(missing_fields))

    @property
    def is_valid(self) -> bool:
        return self.status is ValidationStatus.COMPLETE

    def display_text(self) -> str:
        if self.is_valid:
            return self.serialized_record or ""
        return "MISSING_FIELDS:" + ", ".join(self.missing_fields)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "serialized_record": self.serialized_record,
            "missing_fields": list(self.missing_fields),
        }
