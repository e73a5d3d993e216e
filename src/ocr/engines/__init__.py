"""
Recognition engines (text and barcode).

The public recognition API lives in `ocr.module`.
"""

from .base import BarcodeEngine, OcrEngine
from .pyzbar_barcode import PyzbarBarcodeEngine
from .tesseract_cli import TesseractCliEngine, parse_tesseract_tsv

__all__ = ["OcrEngine", "BarcodeEngine", "TesseractCliEngine", "PyzbarBarcodeEngine", "parse_tesseract_tsv"]
