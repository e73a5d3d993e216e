from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from contracts.label import ExtractionResult, ValidationOutcome
from contracts.ocr import BarcodeResult, OCRResult, OcrError
from extraction.config import ExtractionConfig
from extraction.module import extract_from_ocr_result
from ocr.contracts import OcrConfig
from ocr.engines.base import BarcodeEngine, OcrEngine
from ocr.module import get_barcode_engine, get_ocr_engine
from validation.validator import LabelValidator

from .session import ScanSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanOutcome:
    session_id: str
    ocr: OCRResult
    barcode: BarcodeResult
    extraction: ExtractionResult
    validation: ValidationOutcome


class CapturePipeline:
    """
    Runs one extraction pass per finalized label image.

    Text and barcode recognition run concurrently; both must finish before
    the record is assembled, in whichever order they complete. Recognition
    failures degrade to empty input.
    """

    def __init__(
        self,
        config: OcrConfig,
        *,
        text_engine: OcrEngine | None = None,
        barcode_engine: BarcodeEngine | None = None,
        extraction_config: ExtractionConfig | None = None,
        validator: LabelValidator | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.config = config
        self.text_engine = text_engine or get_ocr_engine(config.engine)
        self.barcode_engine = barcode_engine or get_barcode_engine(config.barcode_engine)
        self.extraction_config = extraction_config or ExtractionConfig()
        self.validator = validator or LabelValidator()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="label-recognition")

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "CapturePipeline":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _recognize_text(self, image_file: Path) -> OCRResult:
        return self.text_engine.run_on_image_file(config=self.config, image_file=image_file, source_relpath=None)

    def _recognize_barcode(self, image_file: Path) -> BarcodeResult:
        return self.barcode_engine.run_on_image_file(image_file=image_file)

    def _join_text(self, future: Future) -> OCRResult:
        engine = self.config.engine.value
        try:
            result = future.result()
        except Exception as e:  # collaborator failure means "no text", never a crash
            logger.exception("Text recognition raised")
            return OCRResult.empty(engine=engine, errors=[OcrError(code="OCR_ENGINE_RAISED", message=str(e))])
        if not result.ok:
            logger.warning("Text recognition failed: %s", [e.code for e in result.errors])
        return result

    def _join_barcode(self, future: Future) -> BarcodeResult:
        engine = self.config.barcode_engine.value
        try:
            result = future.result()
        except Exception as e:  # collaborator failure means "no barcode", never a crash
            logger.exception("Barcode recognition raised")
            return BarcodeResult.empty(engine=engine, errors=[OcrError(code="BARCODE_ENGINE_RAISED", message=str(e))])
        if not result.ok:
            logger.warning("Barcode recognition failed: %s", [e.code for e in result.errors])
        return result

    def process_capture(self, image_file: Path, session: ScanSession | None = None) -> ScanOutcome | None:
        """
        Recognize, extract and validate one captured label image.

        Returns None when the session was abandoned before recognition finished.
        """

        session = session or ScanSession()

        text_future = self._executor.submit(self._recognize_text, image_file)
        barcode_future = self._executor.submit(self._recognize_barcode, image_file)

        ocr = self._join_text(text_future)
        barcode = self._join_barcode(barcode_future)

        if session.abandoned:
            logger.info("Scan session %s abandoned; discarding recognition results", session.session_id)
            return None

        bar_code = barcode.selected_value if barcode.ok else ""
        extraction = extract_from_ocr_result(ocr, bar_code=bar_code, config=self.extraction_config)
        validation = self.validator.validate(extraction.record)

        return ScanOutcome(
            session_id=session.session_id,
            ocr=ocr,
            barcode=barcode,
            extraction=extraction,
            validation=validation,
        )
