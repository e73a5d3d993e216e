from __future__ import annotations

import argparse
import logging
from pathlib import Path

from contracts.ocr import BarcodeResult

from .artifacts import write_ocr_json_artifact
from .contracts import OcrConfig
from .data_access import DataAccessError
from .module import resolve_label_image, run_barcode_on_image_file, run_ocr_on_image_relpath

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="label-ocr",
        description="Recognize a captured shipping label: text blocks/lines with boxes, optionally barcodes, as JSON.",
    )
    p.add_argument("--data-root", required=True, type=Path, help="Directory holding captured label images.")
    p.add_argument("--image-relpath", required=True, help="Label image path relative to --data-root.")
    p.add_argument("--out", required=True, type=Path, help="Where to write the recognition JSON artifact.")
    p.add_argument("--confidence-floor", type=float, default=0.0, help="Drop words below this confidence (0..1).")
    p.add_argument("--language", default="eng+fra", help="Tesseract languages; labels are bilingual (default: eng+fra).")
    p.add_argument("--psm", type=int, default=None, help="Tesseract page segmentation mode.")
    p.add_argument("--timeout-s", type=float, default=120.0)
    p.add_argument("--compute-source-sha256", action="store_true", help="Record the image SHA-256 in meta.")
    p.add_argument("--with-barcode", action="store_true", help="Decode barcodes too and embed them in the artifact.")
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING).")
    return p


def _decode_barcodes(config: OcrConfig, image_relpath: str) -> BarcodeResult | None:
    try:
        image_file = resolve_label_image(config=config, image_relpath=image_relpath)
    except DataAccessError:
        # The text result already carries OCR_DATA_ACCESS_ERROR.
        return None
    return run_barcode_on_image_file(config=config, image_file=image_file)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = OcrConfig(
        data_root=args.data_root,
        confidence_floor=args.confidence_floor,
        language=args.language,
        psm=args.psm,
        timeout_s=args.timeout_s,
        compute_source_sha256=args.compute_source_sha256,
    )

    result = run_ocr_on_image_relpath(config=config, image_relpath=args.image_relpath)
    if not result.ok:
        logger.warning("Text recognition failed: %s", [e.code for e in result.errors])

    barcode = _decode_barcodes(config, args.image_relpath) if args.with_barcode else None

    write_ocr_json_artifact(result=result, out_file=args.out, barcode=barcode)
    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
