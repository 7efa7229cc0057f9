"""Resolve who should hear about a breached threshold."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from econwatch.models import Recipient, ThresholdDefinition, ThresholdRecipient, User

logger = logging.getLogger(__name__)


@dataclass
class ResolvedRecipients:
    """Third-party recipients plus the owner email ("" when not notified)."""

    recipients: list[Recipient] = field(default_factory=list)
    owner_email: str = ""


def fetch_recipients_for_threshold(db: Session, threshold_id: int) -> list[Recipient]:
    """All recipients linked to threshold_id; empty list is valid."""
    return (
        db.query(Recipient)
        .join(ThresholdRecipient, ThresholdRecipient.recipient_id == Recipient.id)
        .filter(ThresholdRecipient.threshold_id == threshold_id)
        .order_by(Recipient.id)
        .all()
    )


def fetch_user_email(db: Session, user_id: int) -> str:
    """Email of user_id, or "" when the user does not exist."""
    email = db.query(User.email).filter(User.id == user_id).scalar()
    if not email:
        logger.warning("No email found for user_id=%s", user_id)
        return ""
    return email


def resolve(db: Session, definition: ThresholdDefinition) -> ResolvedRecipients:
    """Load recipients for definition and, only if notify_owner, the owner email."""
    recipients = fetch_recipients_for_threshold(db, definition.id)
    owner_email = fetch_user_email(db, definition.owner_user_id) if definition.notify_owner else ""
    return ResolvedRecipients(recipients=recipients, owner_email=owner_email)
