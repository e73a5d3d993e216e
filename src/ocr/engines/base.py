from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from contracts.ocr import BarcodeResult, OCRResult

from ..contracts import OcrConfig


class OcrEngine(ABC):
    """
    Interface for text recognition engines.

    IMPORTANT:
    - Engines return literal text with block/line bounding boxes, in any order.
    - Engines must NOT apply semantic correction/guessing/normalization.
    - Runtime failures are reported as `ok=False` results, not raised.
    """

    @abstractmethod
    def run_on_image_file(
        self, *, config: OcrConfig, image_file: Path, source_relpath: str | None
    ) -> OCRResult:
        raise NotImplementedError


class BarcodeEngine(ABC):
    """
    Interface for barcode recognition engines: decoded display values in
    decode order, failures reported as `ok=False` results.
    """

    @abstractmethod
    def run_on_image_file(self, *, image_file: Path) -> BarcodeResult:
        raise NotImplementedError
