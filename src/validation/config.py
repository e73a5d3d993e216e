from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """
    Minimum plausible lengths for the critical fields.

    Chosen empirically from real label samples; shorter values count as missing.
    """

    min_to_address_length: int = 9
    min_from_address_length: int = 11
    min_barcode_length: int = 7

    def validate(self) -> None:
        for name in ("min_to_address_length", "min_from_address_length", "min_barcode_length"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
