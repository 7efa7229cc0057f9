"""
Compose and send alert emails for one breach.

Recipients each get the adverse or favorable template; the owner (when
notify_owner is set) gets a summary listing who was told. One
NotificationRecord is written per recipient attempt, or a single owner-only
record when no recipient message was attempted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from econwatch.config import REPEAT_POLICY_ONCE_PER_PERIOD, Settings
from econwatch.errors import TemplateMissing
from econwatch.models import NotificationRecord, Recipient
from econwatch.services.email_service import DeliveryChannel
from econwatch.services.recipient_resolver import ResolvedRecipients
from econwatch.services.templates import (
    OWNER_SUMMARY_TEMPLATE,
    RECIPIENT_ADVERSE_TEMPLATE,
    RECIPIENT_FAVORABLE_TEMPLATE,
    TemplateStore,
    render,
)
from econwatch.services.threshold_evaluator import Breach

logger = logging.getLogger(__name__)

OWNER_SUMMARY_SUBJECT = "Your Threshold Was Hit - Here's What to Do Next"


@dataclass(frozen=True)
class SenderIdentity:
    """Name and address substituted into recipient templates."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> SenderIdentity:
        return cls(
            first_name=settings.sender_first_name,
            last_name=settings.sender_last_name,
            email=settings.sender_email,
        )


@dataclass
class DispatchResult:
    """Counts for one breach's dispatch."""

    sent: int = 0
    failed: int = 0
    template_errors: int = 0
    records_written: int = 0
    suppressed: bool = False


def recipient_subject(data_name: str) -> str:
    return f"Urgent: {data_name} Economic Data Alert"


def change_direction(percent_change: float, magnitude_percent: float) -> str:
    """'bad' for an upper-side move past the magnitude, else 'good'."""
    return "bad" if percent_change > magnitude_percent else "good"


def format_recipient_list(recipients: list[Recipient]) -> str:
    return "".join(f"{r.full_name} <{r.email}>\n" for r in recipients)


def already_notified(db: Session, breach: Breach) -> bool:
    """True if a record exists for this threshold and the breach's period tag."""
    existing = (
        db.query(NotificationRecord.id)
        .filter(
            NotificationRecord.threshold_id == breach.definition.id,
            NotificationRecord.data_year == breach.year,
            NotificationRecord.data_period == breach.period,
        )
        .first()
    )
    return existing is not None


def _render_owner_summary(
    templates: TemplateStore,
    breach: Breach,
    resolved: ResolvedRecipients,
    sender: SenderIdentity,
) -> str:
    template = templates.read(OWNER_SUMMARY_TEMPLATE)
    return render(
        template,
        {
            "User First Name": sender.first_name,
            "Threshold Name": breach.data_name,
            "Change Percentage": f"{breach.percent_change:.2f}",
            "Threshold Value": f"{breach.definition.magnitude_percent:.2f}",
            "Good/Bad": change_direction(
                breach.percent_change, breach.definition.magnitude_percent
            ),
            "Recipient List": format_recipient_list(resolved.recipients),
        },
    )


def _record(
    breach: Breach,
    *,
    recipient_id: int | None,
    user_message: str | None,
    recipient_message: str | None,
    delivered: bool,
) -> NotificationRecord:
    return NotificationRecord(
        user_id=breach.definition.owner_user_id,
        recipient_id=recipient_id,
        threshold_id=breach.definition.id,
        user_message=user_message,
        recipient_message=recipient_message,
        delivered=delivered,
        data_year=breach.year,
        data_period=breach.period,
    )


def dispatch(
    db: Session,
    breach: Breach,
    resolved: ResolvedRecipients,
    channel: DeliveryChannel,
    templates: TemplateStore,
    sender: SenderIdentity,
    repeat_policy: str = REPEAT_POLICY_ONCE_PER_PERIOD,
) -> DispatchResult:
    """Send all messages for breach and persist the audit records.

    Template and delivery failures affect only the message concerned. Under
    the once_per_period policy a breach already notified for its period tag
    is suppressed without sending anything.
    """
    result = DispatchResult()
    definition = breach.definition

    if repeat_policy == REPEAT_POLICY_ONCE_PER_PERIOD and already_notified(db, breach):
        logger.info(
            "Skipping threshold %d: already notified for %s-%s",
            definition.id,
            breach.year,
            breach.period,
        )
        result.suppressed = True
        return result

    owner_summary: str | None = None
    if resolved.owner_email:
        try:
            owner_summary = _render_owner_summary(templates, breach, resolved, sender)
        except TemplateMissing as exc:
            logger.error("Error formatting owner email for threshold %d: %s", definition.id, exc)
            result.template_errors += 1

    template_name = RECIPIENT_ADVERSE_TEMPLATE if breach.is_adverse else RECIPIENT_FAVORABLE_TEMPLATE
    subject = recipient_subject(breach.data_name)
    records: list[NotificationRecord] = []

    if resolved.recipients:
        try:
            recipient_template = templates.read(template_name)
        except TemplateMissing as exc:
            logger.error("Error formatting recipient emails for threshold %d: %s", definition.id, exc)
            result.template_errors += len(resolved.recipients)
            recipient_template = None

        if recipient_template is not None:
            for recipient in resolved.recipients:
                message = render(
                    recipient_template,
                    {
                        "Recipient Name": recipient.full_name,
                        "Threshold Name": breach.data_name,
                        "Change Percentage": f"{breach.percent_change:.2f}",
                        "User First Name": sender.first_name,
                        "User Last Name": sender.last_name,
                        "User Email": sender.email,
                    },
                )
                delivered = channel.send(recipient.email, subject, message)
                if delivered:
                    result.sent += 1
                else:
                    result.failed += 1
                records.append(
                    _record(
                        breach,
                        recipient_id=recipient.id,
                        user_message=owner_summary,
                        recipient_message=message,
                        delivered=delivered,
                    )
                )

    if owner_summary is not None:
        owner_delivered = channel.send(resolved.owner_email, OWNER_SUMMARY_SUBJECT, owner_summary)
        if owner_delivered:
            result.sent += 1
        else:
            result.failed += 1
        # No recipient message went out, so the owner summary carries the audit row
        if not records:
            records.append(
                _record(
                    breach,
                    recipient_id=None,
                    user_message=owner_summary,
                    recipient_message=None,
                    delivered=owner_delivered,
                )
            )

    if records:
        db.add_all(records)
        db.commit()
        result.records_written = len(records)

    logger.info(
        "Dispatch for threshold %d: sent=%d failed=%d template_errors=%d records=%d",
        definition.id,
        result.sent,
        result.failed,
        result.template_errors,
        result.records_written,
    )
    return result
