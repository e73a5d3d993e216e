from __future__ import annotations

from pathlib import Path
from typing import Any

from contracts.ocr import BarcodeResult, OcrError

from ..contracts import BarcodeEngineName
from .base import BarcodeEngine


class PyzbarBarcodeEngine(BarcodeEngine):
    """
    Barcode recognition with zbar (via pyzbar) over a Pillow-opened image.

    All symbologies zbar supports are decoded; values are kept in decode order.
    """

    def backend_version(self) -> str | None:
        try:
            import pyzbar  # type: ignore

            return getattr(pyzbar, "__version__", None)
        except Exception:
            return None

    def _require_backend(self):
        try:
            from PIL import Image  # type: ignore
            from pyzbar import pyzbar  # type: ignore

            return Image, pyzbar
        except ImportError as e:
            # pyzbar also raises ImportError when the zbar shared library is missing.
            raise RuntimeError(
                "Missing dependency: pyzbar (with the zbar library) and Pillow are required for barcode decoding."
            ) from e

    def run_on_image_file(self, *, image_file: Path) -> BarcodeResult:
        engine = BarcodeEngineName.PYZBAR.value
        meta: dict[str, Any] = {"backend": "zbar", "backend_version": self.backend_version()}

        if not image_file.exists():
            return BarcodeResult(
                engine=engine,
                ok=False,
                errors=[OcrError(code="BARCODE_INPUT_NOT_FOUND", message="Input image file not found")],
                values=[],
                meta=meta,
            )

        try:
            Image, pyzbar = self._require_backend()
        except RuntimeError as e:
            return BarcodeResult(
                engine=engine,
                ok=False,
                errors=[OcrError(code="BARCODE_BACKEND_NOT_INSTALLED", message=str(e))],
                values=[],
                meta=meta,
            )

        try:
            with Image.open(image_file) as img:
                decoded = pyzbar.decode(img)
        except (OSError, ValueError) as e:
            return BarcodeResult(
                engine=engine,
                ok=False,
                errors=[
                    OcrError(
                        code="BARCODE_DECODE_FAILED",
                        message="Barcode backend could not decode the image",
                        detail={"error": str(e)},
                    )
                ],
                values=[],
                meta=meta,
            )

        values: list[str] = []
        symbologies: list[str] = []
        for symbol in decoded:
            values.append(symbol.data.decode("utf-8", errors="replace"))
            symbologies.append(str(symbol.type))

        meta["symbologies"] = symbologies
        return BarcodeResult(engine=engine, ok=True, errors=[], values=values, meta=meta)
