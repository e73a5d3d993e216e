from __future__ import annotations

import csv
import subprocess
from collections import defaultdict
from pathlib import Path
from typing import Any

from contracts.ocr import BBox, OCRBlock, OCRLine, OCRResult, OcrError

from ..contracts import OcrConfig, OcrEngineName
from .base import OcrEngine

# Tesseract TSV levels: 1=page, 2=block, 3=paragraph, 4=line, 5=word
_LEVEL_BLOCK = 2
_LEVEL_WORD = 5


def _normalize_confidence(raw_conf: float | None) -> float | None:
    if raw_conf is None:
        return None
    if raw_conf < 0:
        return None
    # Tesseract TSV is typically 0..100; clamp into [0, 1]
    return max(0.0, min(1.0, raw_conf / 100.0))


def _row_int(row: dict[str, str], key: str, default: str = "0") -> int:
    return int(row.get(key, "") or default)


def _row_bbox(row: dict[str, str]) -> BBox:
    left = _row_int(row, "left")
    top = _row_int(row, "top")
    return BBox(x0=left, y0=top, x1=left + _row_int(row, "width"), y1=top + _row_int(row, "height"))


def _bbox_union_many(boxes: list[BBox]) -> BBox:
    if not boxes:
        return BBox(0, 0, 0, 0)
    out = boxes[0]
    for b in boxes[1:]:
        out = out.union(b)
    return out


def parse_tesseract_tsv(tsv: str, *, confidence_floor: float = 0.0) -> tuple[list[OCRBlock], int]:
    """
    Group word rows into lines by (block, paragraph, line) and lines into
    blocks by block number. Block boxes come from the block-level rows when
    present, else the union of their words.

    Returns the blocks and the number of word rows dropped below the
    confidence floor.
    """

    reader = csv.DictReader(tsv.splitlines(), delimiter="\t", quoting=csv.QUOTE_NONE)

    block_boxes: dict[tuple[int, int], BBox] = {}
    words_by_line: dict[tuple[int, int, int, int], list[tuple[int, str, BBox]]] = defaultdict(list)
    dropped = 0

    for row in reader:
        try:
            level = _row_int(row, "level")
            page_num = _row_int(row, "page_num", "1")
            block_num = _row_int(row, "block_num")
            par_num = _row_int(row, "par_num")
            line_num = _row_int(row, "line_num")
            word_num = _row_int(row, "word_num")
            bbox = _row_bbox(row)
        except ValueError:
            # Malformed geometry rows are dropped (no guessing).
            continue

        if level == _LEVEL_BLOCK:
            block_boxes[(page_num, block_num)] = bbox
            continue
        if level != _LEVEL_WORD:
            continue

        text = row.get("text") or ""
        if text.strip() == "":
            continue

        conf_str = row.get("conf", "")
        try:
            raw_conf: float | None = float(conf_str) if conf_str != "" else None
        except ValueError:
            raw_conf = None
        conf = _normalize_confidence(raw_conf)
        if conf is not None and conf < confidence_floor:
            dropped += 1
            continue

        words_by_line[(page_num, block_num, par_num, line_num)].append((word_num, text, bbox))

    lines_by_block: dict[tuple[int, int], list[OCRLine]] = defaultdict(list)
    word_boxes_by_block: dict[tuple[int, int], list[BBox]] = defaultdict(list)

    # Structural order keeps the emitted block/line order deterministic.
    for key in sorted(words_by_line.keys()):
        words = sorted(words_by_line[key], key=lambda w: w[0])
        line_bbox = _bbox_union_many([w[2] for w in words])
        block_key = (key[0], key[1])
        lines_by_block[block_key].append(OCRLine(text=" ".join(w[1] for w in words), bbox=line_bbox))
        word_boxes_by_block[block_key].extend(w[2] for w in words)

    blocks: list[OCRBlock] = []
    for block_key in sorted(lines_by_block.keys()):
        bbox = block_boxes.get(block_key) or _bbox_union_many(word_boxes_by_block[block_key])
        blocks.append(OCRBlock(bbox=bbox, lines=lines_by_block[block_key]))

    return blocks, dropped


class TesseractCliEngine(OcrEngine):
    """
    Tesseract OCR via `tesseract` CLI, parsed from TSV output into blocks of lines.

    This engine performs no correction and no semantic filtering. Only an
    optional confidence floor is applied.
    """

    def run_on_image_file(
        self, *, config: OcrConfig, image_file: Path, source_relpath: str | None
    ) -> OCRResult:
        meta: dict[str, Any] = {
            "backend": "tesseract",
            "backend_mode": "cli",
            "language": config.language,
            "psm": config.psm,
            "confidence_floor": config.confidence_floor,
        }
        engine = OcrEngineName.TESSERACT_CLI.value

        def _failed(error: OcrError) -> OCRResult:
            return OCRResult(
                engine=engine,
                ok=False,
                errors=[error],
                meta=meta,
                blocks=[],
                source_image_relpath=source_relpath,
            )

        if not image_file.exists():
            detail: dict[str, Any] = {"source_image_relpath": source_relpath}
            if source_relpath is None:
                # Only include absolute path when the caller did not provide a relpath.
                detail["image_file"] = str(image_file)
            return _failed(
                OcrError(code="OCR_INPUT_NOT_FOUND", message="Input image file not found", detail=detail)
            )

        cmd = [
            "tesseract",
            str(image_file),
            "stdout",
            "-l",
            config.language,
        ]

        if config.psm is not None:
            cmd.extend(["--psm", str(config.psm)])

        cmd.append("tsv")
        # Keep artifacts stable/portable: do not embed absolute paths.
        meta["command_template"] = ["tesseract", "<IMAGE_FILE>", *cmd[2:]]

        try:
            proc = subprocess.run(
                cmd,
                check=False,
                capture_output=True,
                text=True,
                timeout=config.timeout_s,
            )
        except FileNotFoundError:
            return _failed(
                OcrError(
                    code="OCR_BACKEND_NOT_INSTALLED",
                    message="tesseract binary not found on PATH",
                    detail={"expected_command": "tesseract"},
                )
            )
        except subprocess.TimeoutExpired:
            return _failed(
                OcrError(
                    code="OCR_TIMEOUT",
                    message="OCR backend timed out",
                    detail={"timeout_s": config.timeout_s},
                )
            )

        if proc.returncode != 0:
            return _failed(
                OcrError(
                    code="OCR_BACKEND_ERROR",
                    message="OCR backend returned a non-zero exit code",
                    detail={
                        "returncode": proc.returncode,
                        "stderr": proc.stderr[-4000:],  # truncate for artifact stability
                    },
                )
            )

        blocks, dropped = parse_tesseract_tsv(proc.stdout, confidence_floor=config.confidence_floor)
        meta["dropped_words_below_floor"] = dropped

        return OCRResult(
            engine=engine,
            ok=True,
            errors=[],
            meta=meta,
            blocks=blocks,
            source_image_relpath=source_relpath,
        )
