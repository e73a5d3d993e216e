from __future__ import annotations

import json
import unittest

from contracts.label import LabelRecord, ValidationStatus
from validation.config import ValidationConfig
from validation.feedback import ValidationFeedback
from validation.validator import LabelValidator

GOOD_TO = "Julie Tester, Laval QC H7W 4H4"
GOOD_FROM = "ACME Outfitters, Ottawa ON K1A 0B1"
GOOD_BARCODE = "PHWH7447023210235282270000200"


class _RecordingFeedback(ValidationFeedback):
    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def on_validation_failed(self, missing_fields: list[str]) -> None:
        self.calls.append(missing_fields)


class TestLabelValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.feedback = _RecordingFeedback()
        self.validator = LabelValidator(feedback=self.feedback)

    def test_complete_record_is_serialized(self) -> None:
        record = LabelRecord(to_address=GOOD_TO, from_address=GOOD_FROM, bar_code=GOOD_BARCODE, reference="Réf 1")
        outcome = self.validator.validate(record)

        self.assertEqual(outcome.status, ValidationStatus.COMPLETE)
        self.assertTrue(outcome.is_valid)
        self.assertEqual(outcome.missing_fields, [])
        self.assertEqual(json.loads(outcome.serialized_record), record.to_dict())
        self.assertEqual(list(json.loads(outcome.serialized_record).keys())[:3], ["productType", "toAddress", "destPostalCode"])
        self.assertIn("Réf 1", outcome.serialized_record)
        self.assertEqual(self.feedback.calls, [])

    def test_to_address_length_boundary(self) -> None:
        nine = LabelRecord(to_address="123456789", from_address=GOOD_FROM, bar_code=GOOD_BARCODE)
        self.assertTrue(self.validator.validate(nine).is_valid)

        eight = LabelRecord(to_address="12345678", from_address=GOOD_FROM, bar_code="123456")
        outcome = self.validator.validate(eight)
        self.assertEqual(outcome.status, ValidationStatus.INCOMPLETE)
        self.assertIsNone(outcome.serialized_record)
        self.assertEqual(outcome.missing_fields, ["toAddress", "barCode"])

    def test_from_address_and_barcode_boundaries(self) -> None:
        ok = LabelRecord(to_address=GOOD_TO, from_address="12345678901", bar_code="1234567")
        self.assertTrue(self.validator.validate(ok).is_valid)

        short = LabelRecord(to_address=GOOD_TO, from_address="1234567890", bar_code="1234567")
        self.assertEqual(self.validator.validate(short).missing_fields, ["fromAddress"])

    def test_missing_order_is_stable(self) -> None:
        outcome = self.validator.validate(LabelRecord())
        self.assertEqual(outcome.missing_fields, ["toAddress", "fromAddress", "barCode"])
        self.assertEqual(outcome.display_text(), "MISSING_FIELDS:toAddress, fromAddress, barCode")
        self.assertEqual(self.validator.validate(LabelRecord()).missing_fields, outcome.missing_fields)

    def test_blank_values_count_as_missing(self) -> None:
        record = LabelRecord(to_address=" " * 12, from_address=GOOD_FROM, bar_code=GOOD_BARCODE)
        self.assertEqual(self.validator.validate(record).missing_fields, ["toAddress"])

    def test_feedback_alerted_once_per_failure(self) -> None:
        self.validator.validate(LabelRecord(to_address=GOOD_TO, from_address=GOOD_FROM))
        self.validator.validate(LabelRecord(to_address=GOOD_TO, from_address=GOOD_FROM, bar_code=GOOD_BARCODE))
        self.assertEqual(self.feedback.calls, [["barCode"]])

    def test_failing_feedback_still_returns_incomplete_outcome(self) -> None:
        class _BrokenFeedback(ValidationFeedback):
            def on_validation_failed(self, missing_fields: list[str]) -> None:
                raise OSError("audio device busy")

        validator = LabelValidator(feedback=_BrokenFeedback())
        with self.assertLogs("validation.validator", level="ERROR"):
            outcome = validator.validate(LabelRecord())

        self.assertEqual(outcome.status, ValidationStatus.INCOMPLETE)
        self.assertEqual(outcome.missing_fields, ["toAddress", "fromAddress", "barCode"])

    def test_thresholds_are_configurable(self) -> None:
        validator = LabelValidator(ValidationConfig(min_barcode_length=30), feedback=self.feedback)
        record = LabelRecord(to_address=GOOD_TO, from_address=GOOD_FROM, bar_code=GOOD_BARCODE)
        self.assertEqual(validator.validate(record).missing_fields, ["barCode"])

    def test_invalid_config_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            LabelValidator(ValidationConfig(min_to_address_length=0))


if __name__ == "__main__":
    unittest.main()
