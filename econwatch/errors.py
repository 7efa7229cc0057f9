"""Error taxonomy for the sync → evaluate → dispatch cycle.

Failures in the shared reconciliation transaction abort the tick
(FeedUnavailable, ReconciliationFailed). The others are local to one
definition, message or delivery and are logged by the caller, which then
moves on to the next item.
"""

from __future__ import annotations


class EconWatchError(Exception):
    """Base class for cycle errors."""


class FeedUnavailable(EconWatchError):
    """Feed transport failed or its response envelope reported failure."""


class ReconciliationFailed(EconWatchError):
    """Database error during the transactional merge; the batch was rolled back."""


class EvaluationSkipped(EconWatchError):
    """Data for one threshold definition could not be loaded."""

    def __init__(self, threshold_id: int, reason: str) -> None:
        self.threshold_id = threshold_id
        self.reason = reason
        super().__init__(f"threshold {threshold_id}: {reason}")


class TemplateMissing(EconWatchError):
    """An email template could not be read."""

    def __init__(self, name: str, reason: str = "") -> None:
        self.name = name
        super().__init__(f"template {name!r} unavailable{': ' + reason if reason else ''}")


class DeliveryFailed(EconWatchError):
    """The delivery channel could not send one message."""

    def __init__(self, to: str, reason: str) -> None:
        self.to = to
        self.reason = reason
        super().__init__(f"delivery to {to} failed: {reason}")
