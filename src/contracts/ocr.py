from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class BBox:
    x0: int
    y0: int
    x1: int
    y1: int

    def width(self) -> int:
        return int(self.x1 - self.x0)

    def height(self) -> int:
        return int(self.y1 - self.y0)

    def union(self, other: "BBox") -> "BBox":
        return BBox(
            x0=min(self.x0, other.x0),
            y0=min(self.y0, other.y0),
            x1=max(self.x1, other.x1),
            y1=max(self.y1, other.y1),
        )

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "BBox":
        return BBox(x0=int(d["x0"]), y0=int(d["y0"]), x1=int(d["x1"]), y1=int(d["y1"]))

    def to_dict(self) -> dict[str, Any]:
        return {"x0": self.x0, "y0": self.y0, "x1": self.x1, "y1": self.y1}


@dataclass(frozen=True, slots=True)
class OCRLine:
    text: str
    bbox: BBox

    @property
    def vertical_position(self) -> int:
        return self.bbox.y0

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "OCRLine":
        return OCRLine(text=str(d.get("text", "")), bbox=BBox.from_dict(d["bbox"]))

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "bbox": self.bbox.to_dict()}


@dataclass(frozen=True, slots=True)
class OCRBlock:
    # Block position comes from the provider's own block box, not from its lines.
    bbox: BBox
    lines: list[OCRLine]

    @property
    def vertical_position(self) -> int:
        return self.bbox.y0

    @property
    def text(self) -> str:
        """Unsegmented block text, lines joined in provider order."""
        return "\n".join(line.text for line in self.lines)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "OCRBlock":
        lines_raw = d.get("lines") or []
        if not isinstance(lines_raw, list):
            raise TypeError("OCRBlock.lines must be a list")
        return OCRBlock(bbox=BBox.from_dict(d["bbox"]), lines=[OCRLine.from_dict(x) for x in lines_raw])

    def to_dict(self) -> dict[str, Any]:
        return {"bbox": self.bbox.to_dict(), "lines": [ln.to_dict() for ln in self.lines]}


@dataclass(frozen=True, slots=True)
class OcrError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "OcrError":
        if "code" not in d:
            raise TypeError("OcrError entries must include 'code'")
        return OcrError(
            code=str(d["code"]),
            message=str(d.get("message", "")),
            detail=(None if d.get("detail") is None else dict(d["detail"])),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


@dataclass(frozen=True, slots=True)
class OCRResult:
    """
    Text recognition output for one label image.

    Blocks are in whatever order the provider enumerated them; ordering is the
    normalizer's job. On failure `ok` is False and `blocks` is empty.
    """

    engine: str
    ok: bool
    errors: list[OcrError]
    meta: dict[str, Any]
    blocks: list[OCRBlock]
    source_image_relpath: str | None = None

    @staticmethod
    def empty(*, engine: str, errors: list[OcrError] | None = None) -> "OCRResult":
        return OCRResult(engine=engine, ok=not errors, errors=list(errors or []), meta={}, blocks=[])

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "OCRResult":
        blocks_raw = d.get("blocks") or []
        if not isinstance(blocks_raw, list):
            raise TypeError("OCRResult.blocks must be a list")

        # Errors may be plain codes or {code, message, detail} objects.
        errors_raw = d.get("errors") or []
        if not isinstance(errors_raw, list):
            raise TypeError("OCRResult.errors must be a list")

        errors: list[OcrError] = []
        for e in errors_raw:
            if isinstance(e, str):
                errors.append(OcrError(code=e, message=""))
            elif isinstance(e, dict):
                errors.append(OcrError.from_dict(e))
            else:
                raise TypeError("OCRResult.errors entries must be str or dict-with-code")

        return OCRResult(
            engine=str(d.get("engine", "")),
            ok=bool(d.get("ok", False)),
            errors=errors,
            meta=dict(d.get("meta") or {}),
            blocks=[OCRBlock.from_dict(b) for b in blocks_raw],
            source_image_relpath=(None if d.get("source_image_relpath") is None else str(d.get("source_image_relpath"))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine": self.engine,
            "ok": self.ok,
            "errors": [e.to_dict() for e in self.errors],
            "meta": dict(self.meta),
            "blocks": [b.to_dict() for b in self.blocks],
            "source_image_relpath": self.source_image_relpath,
        }


@dataclass(frozen=True, slots=True)
class BarcodeResult:
    """
    Barcode recognition output for one label image.

    `values` keeps decode order; when several barcodes are found the last one
    seen is the one handed to the extraction core.
    """

    engine: str
    ok: bool
    errors: list[OcrError]
    values: list[str]
    meta: dict[str, Any]

    @property
    def selected_value(self) -> str:
        return self.values[-1] if self.values else ""

    @staticmethod
    def empty(*, engine: str, errors: list[OcrError] | None = None) -> "BarcodeResult":
        return BarcodeResult(engine=engine, ok=not errors, errors=list(errors or []), values=[], meta={})

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine": self.engine,
            "ok": self.ok,
            "errors": [e.to_dict() for e in self.errors],
            "values": list(self.values),
            "meta": dict(self.meta),
        }
