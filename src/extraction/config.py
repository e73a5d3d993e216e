from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ExtractionConfig:
    """
    Field extraction parameters.

    Defaults are empirically tuned constants from real Canada Post labels.
    """

    # Preceding blocks searched for a weight value when the KG block has none.
    weight_lookback_blocks: int = 3
    weight_unit_suffix: str = "kg"

    def validate(self) -> None:
        if self.weight_lookback_blocks < 0:
            raise ValueError("weight_lookback_blocks must be >= 0")
        if not self.weight_unit_suffix:
            raise ValueError("weight_unit_suffix must be non-empty")
