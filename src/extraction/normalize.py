from __future__ import annotations

import logging
from typing import Iterable

from contracts.label import NormalizedDocument
from contracts.ocr import OCRBlock

logger = logging.getLogger(__name__)


def normalize_blocks(blocks: Iterable[OCRBlock]) -> NormalizedDocument:
    """
    Order recognized blocks top-to-bottom, and each block's lines top-to-bottom.

    Both sorts are stable: equal positions keep their provider order. No field
    semantics here, geometry only.
    """

    ordered_blocks = sorted(blocks, key=lambda b: b.vertical_position)

    out: list[tuple[str, ...]] = []
    for block in ordered_blocks:
        lines = tuple(ln.text for ln in sorted(block.lines, key=lambda ln: ln.vertical_position))
        out.append(lines)
        bb = block.bbox
        logger.debug(
            "Sorted text block: %s bounding box: left=%d top=%d right=%d bottom=%d",
            list(lines),
            bb.x0,
            bb.y0,
            bb.x1,
            bb.y1,
        )

    return NormalizedDocument(blocks=tuple(out))
