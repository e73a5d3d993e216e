from __future__ import annotations

import logging

from contracts.label import LabelField, LabelRecord, ValidationOutcome
from extraction.artifacts import serialize_label_record

from .config import ValidationConfig
from .feedback import LoggingFeedback, ValidationFeedback

logger = logging.getLogger(__name__)


class LabelValidator:
    """
    Minimal completeness check over the critical fields.

    A record is COMPLETE when the recipient address, sender address and
    barcode all reach their minimum lengths; otherwise it is INCOMPLETE and
    the feedback collaborator is alerted once.
    """

    def __init__(self, config: ValidationConfig | None = None, feedback: ValidationFeedback | None = None) -> None:
        self.config = config or ValidationConfig()
        self.config.validate()
        self.feedback = feedback or LoggingFeedback()

    def _critical_fields(self) -> tuple[tuple[LabelField, int], ...]:
        # Order here is the order of the missing-fields list.
        return (
            (LabelField.TO_ADDRESS, self.config.min_to_address_length),
            (LabelField.FROM_ADDRESS, self.config.min_from_address_length),
            (LabelField.BAR_CODE, self.config.min_barcode_length),
        )

    def missing_fields(self, record: LabelRecord) -> list[str]:
        missing: list[str] = []
        for label_field, min_length in self._critical_fields():
            value = record.value(label_field)
            if not value.strip() or len(value) < min_length:
                missing.append(label_field.value)
        return missing

    def validate(self, record: LabelRecord) -> ValidationOutcome:
        missing = self.missing_fields(record)
        if not missing:
            return ValidationOutcome.valid(serialize_label_record(record))

        logger.info("Validation failed; missing fields: %s", missing)
        try:
            self.feedback.on_validation_failed(list(missing))
        except Exception:  # a failed alert never replaces the outcome
            logger.exception("Validation feedback raised")
        return ValidationOutcome.invalid(missing)


def validate_label_record(record: LabelRecord, config: ValidationConfig | None = None) -> ValidationOutcome:
    return LabelValidator(config).validate(record)
