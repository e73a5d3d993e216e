from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.label import ExtractionResult, LabelRecord, ValidationOutcome


def serialize_label_record(record: LabelRecord) -> str:
    """
    Pretty JSON of the record. Field order is the record order, so keys are
    not sorted.
    """

    return json.dumps(record.to_dict(), ensure_ascii=False, indent=2)


def format_label_record_text(record: LabelRecord) -> str:
    """Field-per-line "name: value" rendering for display or clipboard."""
    return "\n".join(f"{name}: {value}" for name, value in record.to_dict().items())


def serialize_extraction_artifact(result: ExtractionResult, outcome: ValidationOutcome | None = None) -> str:
    payload: dict[str, Any] = result.to_dict()
    if outcome is not None:
        payload["validation"] = outcome.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_extraction_json_artifact(
    *, result: ExtractionResult, outcome: ValidationOutcome | None = None, out_file: Path
) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_extraction_artifact(result, outcome), encoding="utf-8")
