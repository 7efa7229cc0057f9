"""
Email template store.

Loads .txt templates from econwatch/templates/email (or EMAIL_TEMPLATE_DIR)
and renders them by substituting [Placeholder Name] markers verbatim. There
is no nesting or conditional syntax.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path

from econwatch.errors import TemplateMissing

logger = logging.getLogger(__name__)

# Directory where bundled email templates live
_DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

# Template name: safe for path (no path separators, alphanumeric/underscore/hyphen/dot only)
_TEMPLATE_NAME_SAFE = re.compile(r"^[a-zA-Z0-9_.-]+$")

RECIPIENT_ADVERSE_TEMPLATE = "recipient_notification_negative.txt"
RECIPIENT_FAVORABLE_TEMPLATE = "recipient_notification_positive.txt"
OWNER_SUMMARY_TEMPLATE = "user_notification.txt"


class TemplateStore:
    """Reads named templates from a directory."""

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = Path(directory) if directory else _DEFAULT_TEMPLATE_DIR

    def read(self, name: str) -> str:
        """Return template text.

        Raises:
            TemplateMissing: name is unsafe, or the file is absent/unreadable.
        """
        if not _TEMPLATE_NAME_SAFE.match(name) or name.startswith("."):
            raise TemplateMissing(name, "invalid template name")
        path = self.directory / name
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise TemplateMissing(name, str(exc)) from exc


def render(template: str, replacements: Mapping[str, str]) -> str:
    """Replace every [Key] in template with replacements[Key]."""
    message = template
    for placeholder, value in replacements.items():
        message = message.replace(f"[{placeholder}]", value)
    return message
