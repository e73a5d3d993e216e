from __future__ import annotations

import tempfile
import threading
import unittest
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from contracts.label import ValidationStatus
from contracts.ocr import BarcodeResult, OCRResult, OcrError
from label_fixtures import FULL_LABEL_BARCODE, FULL_LABEL_BLOCKS, stacked_blocks
from ocr.contracts import OcrConfig
from ocr.engines.base import BarcodeEngine, OcrEngine
from scanning.capture import CapturePipeline
from scanning.preview import LivePreviewMonitor, SingleSlotBarcodeReader, detect_label
from scanning.session import ScanSession
from validation.feedback import SilentFeedback
from validation.validator import LabelValidator


class _FakeTextEngine(OcrEngine):
    def __init__(self, result: OCRResult | None = None, *, error: Exception | None = None, before_return=None) -> None:
        self.result = result or OCRResult(engine="fake", ok=True, errors=[], meta={}, blocks=stacked_blocks(*FULL_LABEL_BLOCKS))
        self.error = error
        self.before_return = before_return
        self.calls = 0

    def run_on_image_file(self, *, config: OcrConfig, image_file: Path, source_relpath: str | None) -> OCRResult:
        self.calls += 1
        if self.before_return is not None:
            self.before_return()
        if self.error is not None:
            raise self.error
        return self.result


class _FakeBarcodeEngine(BarcodeEngine):
    def __init__(self, values: list[str] | None = None, *, ok: bool = True, gate: threading.Event | None = None) -> None:
        self.values = [FULL_LABEL_BARCODE] if values is None else values
        self.ok = ok
        self.gate = gate
        self.started = threading.Event()

    def run_on_image_file(self, *, image_file: Path) -> BarcodeResult:
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if not self.ok:
            return BarcodeResult.empty(engine="fake", errors=[OcrError(code="BARCODE_DECODE_FAILED", message="x")])
        return BarcodeResult(engine="fake", ok=True, errors=[], values=list(self.values), meta={})


class TestCapturePipeline(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.image = self.root / "capture.png"
        self.config = OcrConfig(data_root=self.root)
        self.validator = LabelValidator(feedback=SilentFeedback())

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _pipeline(self, text_engine: OcrEngine, barcode_engine: BarcodeEngine) -> CapturePipeline:
        return CapturePipeline(
            self.config, text_engine=text_engine, barcode_engine=barcode_engine, validator=self.validator
        )

    def test_joins_both_recognitions_before_extraction(self) -> None:
        # The barcode finishes only after text recognition has returned.
        gate = threading.Event()
        barcode_engine = _FakeBarcodeEngine(gate=gate)
        text_engine = _FakeTextEngine(before_return=gate.set)

        with self._pipeline(text_engine, barcode_engine) as pipeline:
            outcome = pipeline.process_capture(self.image)

        self.assertIsNotNone(outcome)
        self.assertEqual(outcome.extraction.record.bar_code, FULL_LABEL_BARCODE)
        self.assertEqual(outcome.extraction.record.product_type, "Priority")
        self.assertEqual(outcome.validation.status, ValidationStatus.COMPLETE)

    def test_barcode_failure_degrades_to_empty_value(self) -> None:
        with self._pipeline(_FakeTextEngine(), _FakeBarcodeEngine(ok=False)) as pipeline:
            outcome = pipeline.process_capture(self.image)

        self.assertEqual(outcome.extraction.record.bar_code, "")
        self.assertEqual(outcome.extraction.record.track_pin, "7023 2102 3528 2270")
        self.assertEqual(outcome.validation.missing_fields, ["barCode"])

    def test_raising_text_engine_degrades_to_empty_text(self) -> None:
        with self._pipeline(_FakeTextEngine(error=RuntimeError("camera gone")), _FakeBarcodeEngine()) as pipeline:
            with self.assertLogs("scanning.capture", level="ERROR"):
                outcome = pipeline.process_capture(self.image)

        self.assertEqual([e.code for e in outcome.ocr.errors], ["OCR_ENGINE_RAISED"])
        self.assertEqual(outcome.extraction.record.to_address, "")
        self.assertEqual(outcome.extraction.record.bar_code, FULL_LABEL_BARCODE)
        self.assertEqual(outcome.validation.missing_fields, ["toAddress", "fromAddress"])

    def test_abandoned_session_is_never_assembled(self) -> None:
        session = ScanSession()
        text_engine = _FakeTextEngine(before_return=session.abandon)

        with self._pipeline(text_engine, _FakeBarcodeEngine()) as pipeline:
            self.assertIsNone(pipeline.process_capture(self.image, session))

    def test_borrowed_executor_is_left_running(self) -> None:
        executor = ThreadPoolExecutor(max_workers=2)
        try:
            pipeline = CapturePipeline(
                self.config,
                text_engine=_FakeTextEngine(),
                barcode_engine=_FakeBarcodeEngine(),
                validator=self.validator,
                executor=executor,
            )
            pipeline.close()
            self.assertEqual(executor.submit(lambda: 7).result(timeout=5), 7)
        finally:
            executor.shutdown(wait=True)


class TestLivePreview(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.frame = self.root / "frame.png"
        self.config = OcrConfig(data_root=self.root)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_detect_label_searches_unsegmented_block_text(self) -> None:
        with_postal = OCRResult(engine="fake", ok=True, errors=[], meta={}, blocks=stacked_blocks(["Laval QC", "H7W 4H4"]))
        without = OCRResult(engine="fake", ok=True, errors=[], meta={}, blocks=stacked_blocks(["Laval QC"]))
        self.assertTrue(detect_label(with_postal))
        self.assertFalse(detect_label(without))

    def test_monitor_pauses_after_detection_until_resumed(self) -> None:
        detections: list[int] = []
        engine = _FakeTextEngine()
        monitor = LivePreviewMonitor(self.config, engine, lambda: detections.append(1))

        self.assertTrue(monitor.analyze_frame(self.frame))
        self.assertTrue(monitor.paused)
        self.assertFalse(monitor.analyze_frame(self.frame))
        self.assertEqual(engine.calls, 1)
        self.assertEqual(detections, [1])

        monitor.resume()
        self.assertTrue(monitor.analyze_frame(self.frame))
        self.assertEqual(detections, [1, 1])

    def test_monitor_ignores_frames_without_a_label(self) -> None:
        empty = OCRResult(engine="fake", ok=True, errors=[], meta={}, blocks=stacked_blocks(["nothing"]))
        monitor = LivePreviewMonitor(self.config, _FakeTextEngine(empty), lambda: self.fail("no label in view"))
        self.assertFalse(monitor.analyze_frame(self.frame))
        self.assertFalse(monitor.paused)

    def test_single_slot_reader_drops_frames_while_busy(self) -> None:
        gate = threading.Event()
        engine = _FakeBarcodeEngine(gate=gate)
        reader = SingleSlotBarcodeReader(engine)

        results: list[str | None] = []
        worker = threading.Thread(target=lambda: results.append(reader.try_read(self.frame)))
        worker.start()
        self.assertTrue(engine.started.wait(timeout=5))

        self.assertTrue(reader.busy)
        self.assertIsNone(reader.try_read(self.frame))
        self.assertEqual(reader.dropped_frames, 1)

        gate.set()
        worker.join(timeout=5)
        self.assertEqual(results, [FULL_LABEL_BARCODE])
        self.assertFalse(reader.busy)

    def test_single_slot_reader_reports_failure_as_empty(self) -> None:
        reader = SingleSlotBarcodeReader(_FakeBarcodeEngine(ok=False))
        self.assertEqual(reader.try_read(self.frame), "")

    def test_concurrent_drops_are_all_counted(self) -> None:
        gate = threading.Event()
        engine = _FakeBarcodeEngine(gate=gate)
        reader = SingleSlotBarcodeReader(engine)

        holder = threading.Thread(target=reader.try_read, args=(self.frame,))
        holder.start()
        self.assertTrue(engine.started.wait(timeout=5))

        droppers = [threading.Thread(target=reader.try_read, args=(self.frame,)) for _ in range(16)]
        for t in droppers:
            t.start()
        for t in droppers:
            t.join(timeout=5)

        gate.set()
        holder.join(timeout=5)
        self.assertEqual(reader.dropped_frames, 16)

    def test_concurrent_detections_notify_once(self) -> None:
        # Both frames finish recognition before either one pauses the monitor.
        barrier = threading.Barrier(2, timeout=5)
        engine = _FakeTextEngine(before_return=barrier.wait)
        detections: list[int] = []
        monitor = LivePreviewMonitor(self.config, engine, lambda: detections.append(1))

        results: list[bool] = []
        frames = [threading.Thread(target=lambda: results.append(monitor.analyze_frame(self.frame))) for _ in range(2)]
        for t in frames:
            t.start()
        for t in frames:
            t.join(timeout=5)

        self.assertEqual(sorted(results), [False, True])
        self.assertEqual(detections, [1])
        self.assertTrue(monitor.paused)


if __name__ == "__main__":
    unittest.main()
