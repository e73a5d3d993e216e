"""
Completeness validation of assembled label records.

Classifies a record as COMPLETE (serialized) or INCOMPLETE (ordered missing
field names) and alerts a feedback collaborator on failure.
"""

from .config import ValidationConfig
from .feedback import LoggingFeedback, SilentFeedback, ValidationFeedback
from .validator import LabelValidator, validate_label_record

__all__ = [
    "ValidationConfig",
    "ValidationFeedback",
    "LoggingFeedback",
    "SilentFeedback",
    "LabelValidator",
    "validate_label_record",
]
