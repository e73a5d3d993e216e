from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from contracts.ocr import BarcodeResult, OCRResult, OcrError

from .contracts import BarcodeEngineName, OcrConfig, OcrEngineName
from .data_access import DataAccessError, resolve_under_data_root, sha256_file
from .engines.base import BarcodeEngine, OcrEngine
from .engines.pyzbar_barcode import PyzbarBarcodeEngine
from .engines.tesseract_cli import TesseractCliEngine


def get_ocr_engine(engine: OcrEngineName) -> OcrEngine:
    if engine == OcrEngineName.TESSERACT_CLI:
        return TesseractCliEngine()
    raise ValueError(f"Unsupported OCR engine: {engine}")


def get_barcode_engine(engine: BarcodeEngineName) -> BarcodeEngine:
    if engine == BarcodeEngineName.PYZBAR:
        return PyzbarBarcodeEngine()
    raise ValueError(f"Unsupported barcode engine: {engine}")


def _attach_source_sha256_if_enabled(*, config: OcrConfig, image_file: Path, result: OCRResult) -> OCRResult:
    if not (config.compute_source_sha256 and image_file.exists()):
        return result

    try:
        return replace(result, meta={**result.meta, "source_sha256": sha256_file(image_file)})
    except OSError:
        # Do not fail OCR if hashing fails; add an explicit audit note.
        return replace(
            result,
            errors=result.errors
            + [
                OcrError(
                    code="OCR_AUDIT_HASH_FAILED",
                    message="Failed to compute source SHA-256",
                    detail={"source_image_relpath": result.source_image_relpath},
                )
            ],
        )


def _failed(*, config: OcrConfig, image_relpath: str, error: OcrError) -> OCRResult:
    return OCRResult(
        engine=config.engine.value,
        ok=False,
        errors=[error],
        meta={"confidence_floor": config.confidence_floor},
        blocks=[],
        source_image_relpath=image_relpath,
    )


def resolve_label_image(*, config: OcrConfig, image_relpath: str) -> Path:
    """Resolve a label image relpath under `config.data_root` (raises DataAccessError)."""
    return resolve_under_data_root(data_root=config.data_root, relpath=image_relpath)


def run_ocr_on_image_relpath(*, config: OcrConfig, image_relpath: str) -> OCRResult:
    """
    Run text recognition on a label image referenced by a relative path under
    `config.data_root`.
    """

    if image_relpath.strip().lower().endswith(".pdf"):
        return _failed(
            config=config,
            image_relpath=image_relpath,
            error=OcrError(
                code="OCR_INPUT_IS_PDF",
                message="Text recognition rejects PDF inputs; labels must be captured as images.",
                detail={"source_image_relpath": image_relpath},
            ),
        )

    try:
        image_file = resolve_label_image(config=config, image_relpath=image_relpath)
    except DataAccessError as e:
        return _failed(
            config=config,
            image_relpath=image_relpath,
            error=OcrError(
                code="OCR_DATA_ACCESS_ERROR",
                message=str(e),
                detail={"data_root": str(config.data_root), "relpath": image_relpath},
            ),
        )

    return run_ocr_on_image_file(config=config, image_file=image_file, source_image_relpath=image_relpath)


def run_ocr_on_image_file(*, config: OcrConfig, image_file: Path, source_image_relpath: str | None) -> OCRResult:
    """
    Run text recognition on an explicit image file path (no data root resolution).
    """

    engine = get_ocr_engine(config.engine)
    result = engine.run_on_image_file(config=config, image_file=image_file, source_relpath=source_image_relpath)
    return _attach_source_sha256_if_enabled(config=config, image_file=image_file, result=result)


def run_barcode_on_image_file(*, config: OcrConfig, image_file: Path) -> BarcodeResult:
    return get_barcode_engine(config.barcode_engine).run_on_image_file(image_file=image_file)
