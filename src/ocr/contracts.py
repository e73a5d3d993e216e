from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class OcrEngineName(str, Enum):
    """
    Recognition backends supported by this module.

    Note: engines are *perception only*; they must not correct or filter
    recognized text semantically.
    """

    TESSERACT_CLI = "tesseract_cli"


class BarcodeEngineName(str, Enum):
    PYZBAR = "pyzbar"


@dataclass(frozen=True, slots=True)
class OcrConfig:
    """
    Recognition configuration.

    - `data_root` must be the resolved data root provided by the caller.
    - This module must NOT read environment variables itself.
    """

    data_root: Path
    engine: OcrEngineName = OcrEngineName.TESSERACT_CLI
    barcode_engine: BarcodeEngineName = BarcodeEngineName.PYZBAR
    confidence_floor: float = 0.0  # words below this confidence are dropped
    language: str = "eng+fra"  # bilingual labels (TO/À, FROM/DE)
    psm: int | None = None  # Tesseract page segmentation mode; if None, use default.
    timeout_s: float = 120.0
    compute_source_sha256: bool = False  # optional audit metadata

    def __post_init__(self) -> None:
        if self.confidence_floor < 0.0 or self.confidence_floor > 1.0:
            raise ValueError("confidence_floor must be within [0.0, 1.0]")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")

        # Ensure callers pass an actual Path; this module will resolve it for safe access.
        if not isinstance(self.data_root, Path):
            raise TypeError("data_root must be a pathlib.Path")
