from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class ValidationFeedback(ABC):
    """
    Alert collaborator notified when a scanned label is incomplete.

    Implementations decide how the operator is alerted (tone, vibration,
    banner). They must not raise: a failed alert never fails validation.
    """

    @abstractmethod
    def on_validation_failed(self, missing_fields: list[str]) -> None:
        raise NotImplementedError


class LoggingFeedback(ValidationFeedback):
    def on_validation_failed(self, missing_fields: list[str]) -> None:
        logger.warning("Label incomplete, rescan required; missing fields: %s", ", ".join(missing_fields))


class SilentFeedback(ValidationFeedback):
    def on_validation_failed(self, missing_fields: list[str]) -> None:
        return None
