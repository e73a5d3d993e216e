from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.ocr import BarcodeResult, OCRResult


def serialize_ocr_result(result: OCRResult, barcode: BarcodeResult | None = None) -> str:
    """
    Stable JSON serialization for audit artifacts. The barcode result, when
    given, is embedded under "barcode" so one artifact feeds extraction.
    """

    payload: dict[str, Any] = result.to_dict()
    if barcode is not None:
        payload["barcode"] = barcode.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_ocr_json_artifact(*, result: OCRResult, out_file: Path, barcode: BarcodeResult | None = None) -> None:
    """
    Write recognition output to a JSON artifact file (machine-readable, auditable).

    Note: This helper does not assume any fixed artifact root. Callers provide
    an explicit output path.
    """

    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_ocr_result(result, barcode), encoding="utf-8")
