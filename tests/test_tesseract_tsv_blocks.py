from __future__ import annotations

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from contracts.ocr import BBox, OCRResult
from extraction.module import extract_from_ocr_result
from label_fixtures import SAMPLE_TSV, TSV_HEADER, tsv_row
from ocr.contracts import OcrConfig
from ocr.engines.tesseract_cli import TesseractCliEngine, parse_tesseract_tsv
from ocr.module import run_ocr_on_image_relpath


class TestParseTesseractTsv(unittest.TestCase):
    def test_words_are_grouped_into_lines_and_blocks(self) -> None:
        blocks, dropped = parse_tesseract_tsv(SAMPLE_TSV)

        self.assertEqual(dropped, 0)
        self.assertEqual(len(blocks), 2)
        self.assertEqual([ln.text for ln in blocks[0].lines], ["Julie Tester", "Laval, QC, H7W 4H4"])
        self.assertEqual([ln.text for ln in blocks[1].lines], ["TO: À ~"])
        self.assertEqual(blocks[0].bbox, BBox(10, 300, 410, 360))
        self.assertEqual(blocks[0].lines[1].bbox, BBox(10, 330, 340, 350))

    def test_confidence_floor_drops_low_confidence_words(self) -> None:
        blocks, dropped = parse_tesseract_tsv(SAMPLE_TSV, confidence_floor=0.5)
        self.assertEqual(dropped, 1)
        self.assertEqual(blocks[1].lines[0].text, "TO: À")

    def test_block_box_falls_back_to_word_union(self) -> None:
        tsv = "\n".join(
            [
                TSV_HEADER,
                tsv_row(5, 3, 1, 1, 1, (50, 40, 30, 10), "90", "KG"),
                tsv_row(5, 3, 1, 1, 2, (90, 45, 30, 10), "90", "2.5"),
            ]
        )
        blocks, _ = parse_tesseract_tsv(tsv)
        self.assertEqual(blocks[0].bbox, BBox(50, 40, 120, 55))

    def test_malformed_rows_are_skipped(self) -> None:
        tsv = "\n".join([TSV_HEADER, tsv_row(5, 1, 1, 1, 1, (0, 0, 1, 1), "90", "ok"), "5\t1\t1\t1\t1\t2\tx\t0\t1\t1\t90\tbad"])
        blocks, _ = parse_tesseract_tsv(tsv)
        self.assertEqual([ln.text for ln in blocks[0].lines], ["ok"])

    def test_parsed_blocks_feed_extraction_in_label_order(self) -> None:
        blocks, _ = parse_tesseract_tsv(SAMPLE_TSV, confidence_floor=0.5)
        ocr = OCRResult(engine="tesseract_cli", ok=True, errors=[], meta={}, blocks=blocks)
        record = extract_from_ocr_result(ocr).record
        self.assertEqual(record.to_address, "Julie Tester, Laval, QC, H7W 4H4")


class TestTesseractCliEngine(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.image = self.root / "label.png"
        self.image.write_bytes(b"")
        self.config = OcrConfig(data_root=self.root)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_success_parses_stdout(self) -> None:
        proc = subprocess.CompletedProcess(args=[], returncode=0, stdout=SAMPLE_TSV, stderr="")
        with patch("ocr.engines.tesseract_cli.subprocess.run", return_value=proc) as run:
            result = TesseractCliEngine().run_on_image_file(config=self.config, image_file=self.image, source_relpath="label.png")

        self.assertTrue(result.ok)
        self.assertEqual(len(result.blocks), 2)
        self.assertEqual(result.meta["dropped_words_below_floor"], 0)
        self.assertEqual(result.meta["command_template"], ["tesseract", "<IMAGE_FILE>", "stdout", "-l", "eng+fra", "tsv"])
        self.assertEqual(run.call_args.kwargs["timeout"], 120.0)

    def test_missing_binary(self) -> None:
        with patch("ocr.engines.tesseract_cli.subprocess.run", side_effect=FileNotFoundError()):
            result = TesseractCliEngine().run_on_image_file(config=self.config, image_file=self.image, source_relpath=None)
        self.assertFalse(result.ok)
        self.assertEqual([e.code for e in result.errors], ["OCR_BACKEND_NOT_INSTALLED"])
        self.assertEqual(result.blocks, [])

    def test_timeout(self) -> None:
        with patch(
            "ocr.engines.tesseract_cli.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="tesseract", timeout=1.0),
        ):
            result = TesseractCliEngine().run_on_image_file(config=self.config, image_file=self.image, source_relpath=None)
        self.assertEqual([e.code for e in result.errors], ["OCR_TIMEOUT"])

    def test_non_zero_exit(self) -> None:
        proc = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="boom")
        with patch("ocr.engines.tesseract_cli.subprocess.run", return_value=proc):
            result = TesseractCliEngine().run_on_image_file(config=self.config, image_file=self.image, source_relpath=None)
        self.assertEqual(result.errors[0].code, "OCR_BACKEND_ERROR")
        self.assertEqual(result.errors[0].detail, {"returncode": 1, "stderr": "boom"})

    def test_missing_input_image(self) -> None:
        with patch("ocr.engines.tesseract_cli.subprocess.run") as run:
            result = TesseractCliEngine().run_on_image_file(
                config=self.config, image_file=self.root / "absent.png", source_relpath="absent.png"
            )
        run.assert_not_called()
        self.assertEqual(result.errors[0].code, "OCR_INPUT_NOT_FOUND")
        self.assertNotIn("image_file", result.errors[0].detail)

    def test_relpath_entry_point_rejects_pdf_and_escapes(self) -> None:
        pdf = run_ocr_on_image_relpath(config=self.config, image_relpath="label.pdf")
        self.assertEqual(pdf.errors[0].code, "OCR_INPUT_IS_PDF")

        escaped = run_ocr_on_image_relpath(config=self.config, image_relpath="../outside.png")
        self.assertEqual(escaped.errors[0].code, "OCR_DATA_ACCESS_ERROR")


if __name__ == "__main__":
    unittest.main()
