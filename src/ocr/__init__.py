"""
Recognition stage (perception only): the external text and barcode
collaborators of the extraction core.

Contract:
- Input: a captured label image
- Output: text blocks with lines and bounding boxes (any order), decoded barcode values
- Constraints: no correction, no reordering, no inference; optional confidence floor

Data access:
- No environment variable reads in this module
- No hardcoded paths
- All filesystem access is via explicitly passed resolved data_root/config
"""

from .contracts import BarcodeEngineName, OcrConfig, OcrEngineName
from .module import run_barcode_on_image_file, run_ocr_on_image_file, run_ocr_on_image_relpath

__all__ = [
    "BarcodeEngineName",
    "OcrConfig",
    "OcrEngineName",
    "run_ocr_on_image_file",
    "run_ocr_on_image_relpath",
    "run_barcode_on_image_file",
]
