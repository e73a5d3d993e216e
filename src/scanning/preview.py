from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

from contracts.ocr import OCRResult
from extraction.patterns import contains_postal_code
from ocr.contracts import OcrConfig
from ocr.engines.base import BarcodeEngine, OcrEngine

logger = logging.getLogger(__name__)


def detect_label(ocr: OCRResult) -> bool:
    """
    Live-preview trigger: a postal-code shape anywhere in a block's
    unsegmented text means a shipping label is in view.
    """

    return any(contains_postal_code(block.text) for block in ocr.blocks)


class SingleSlotBarcodeReader:
    """
    Barcode pre-check with at most one recognition in flight.

    A frame arriving while a recognition is outstanding is dropped, not
    queued, so slow decoding never builds a backlog.
    """

    def __init__(self, engine: BarcodeEngine) -> None:
        self.engine = engine
        self._slot = threading.Lock()
        self._counter_lock = threading.Lock()
        self._dropped_frames = 0

    @property
    def busy(self) -> bool:
        return self._slot.locked()

    @property
    def dropped_frames(self) -> int:
        with self._counter_lock:
            return self._dropped_frames

    def try_read(self, image_file: Path) -> str | None:
        """Decoded value ("" when none), or None when the frame was dropped."""
        if not self._slot.acquire(blocking=False):
            with self._counter_lock:
                self._dropped_frames += 1
            logger.debug("Barcode processing already in progress; dropping frame %s", image_file)
            return None
        try:
            result = self.engine.run_on_image_file(image_file=image_file)
        finally:
            self._slot.release()
        if not result.ok:
            logger.debug("Barcode pre-check failed: %s", [e.code for e in result.errors])
            return ""
        return result.selected_value


class LivePreviewMonitor:
    """
    Watches preview frames until a label is detected, then pauses and
    notifies `on_label_detected` so the caller can switch to a full capture.
    """

    def __init__(
        self,
        config: OcrConfig,
        text_engine: OcrEngine,
        on_label_detected: Callable[[], None],
    ) -> None:
        self.config = config
        self.text_engine = text_engine
        self.on_label_detected = on_label_detected
        self._paused = threading.Event()
        self._trigger = threading.Lock()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    def resume(self) -> None:
        self._paused.clear()

    def analyze_frame(self, image_file: Path) -> bool:
        """Returns True when this frame triggered label detection."""
        if self.paused:
            return False

        ocr = self.text_engine.run_on_image_file(config=self.config, image_file=image_file, source_relpath=None)
        if not ocr.ok or not detect_label(ocr):
            return False

        # Frames analysed concurrently may all detect; only the first one notifies.
        with self._trigger:
            if self._paused.is_set():
                return False
            self._paused.set()
        logger.info("Shipping label detected")
        self.on_label_detected()
        return True
