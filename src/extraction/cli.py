from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from contracts.ocr import OCRResult
from validation.config import ValidationConfig
from validation.validator import LabelValidator

from .artifacts import format_label_record_text, write_extraction_json_artifact
from .config import ExtractionConfig
from .module import extract_from_ocr_result


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="label-extract",
        description="Extract and validate shipping-label fields from a recognition JSON artifact.",
    )
    p.add_argument("--input", required=True, type=Path, help="Path to the recognition (OCR) JSON artifact.")
    p.add_argument(
        "--barcode",
        default=None,
        help="Decoded barcode value. Defaults to the last value embedded in the artifact, if any.",
    )
    p.add_argument("--out", type=Path, default=None, help="Optional path for the extraction JSON artifact.")
    p.add_argument("--format", choices=("json", "text"), default="json", help="Rendering of a complete record.")
    p.add_argument("--weight-lookback-blocks", type=int, default=3)
    p.add_argument("--min-to-address-length", type=int, default=9)
    p.add_argument("--min-from-address-length", type=int, default=11)
    p.add_argument("--min-barcode-length", type=int, default=7)
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING).")
    return p


def _barcode_from_artifact(raw: dict) -> str:
    values = (raw.get("barcode") or {}).get("values") or []
    return str(values[-1]) if values else ""


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    raw = json.loads(args.input.read_text(encoding="utf-8"))
    ocr = OCRResult.from_dict(raw)
    bar_code = args.barcode if args.barcode is not None else _barcode_from_artifact(raw)

    result = extract_from_ocr_result(
        ocr,
        bar_code=bar_code,
        config=ExtractionConfig(weight_lookback_blocks=args.weight_lookback_blocks),
    )
    validator = LabelValidator(
        ValidationConfig(
            min_to_address_length=args.min_to_address_length,
            min_from_address_length=args.min_from_address_length,
            min_barcode_length=args.min_barcode_length,
        )
    )
    outcome = validator.validate(result.record)

    if args.out is not None:
        write_extraction_json_artifact(result=result, outcome=outcome, out_file=args.out)

    if outcome.is_valid and args.format == "text":
        print(format_label_record_text(result.record))
    else:
        print(outcome.display_text())

    return 0 if outcome.is_valid else 2


if __name__ == "__main__":
    raise SystemExit(main())
