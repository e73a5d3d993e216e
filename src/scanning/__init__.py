"""
Scan orchestration around the extraction core.

- live preview: postal-code trigger, single-slot barcode pre-check
- capture: concurrent text + barcode recognition joined before one extraction pass
- sessions: abandoned scans are never assembled

The core itself stays synchronous and stateless; all concurrency lives here.
"""

from .capture import CapturePipeline, ScanOutcome
from .preview import LivePreviewMonitor, SingleSlotBarcodeReader, detect_label
from .session import ScanSession

__all__ = [
    "CapturePipeline",
    "ScanOutcome",
    "LivePreviewMonitor",
    "SingleSlotBarcodeReader",
    "detect_label",
    "ScanSession",
]
