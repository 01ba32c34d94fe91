"""Requested field assignments and their fulfilment state."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from pdffill.model.field import FormField
from pdffill.pdf.codec import write_value

logger = logging.getLogger(__name__)


class AssignmentError(ValueError):
    """Raised for an operand that is not of the form ``field=value``."""


def parse_assignment(text: str) -> tuple[str, str]:
    key, separator, value = text.partition("=")
    if not separator:
        raise AssignmentError(text)
    return key, value


@dataclass(slots=True)
class AssignmentSession:
    values: dict[str, str] = field(default_factory=dict)
    fulfilled: dict[str, bool] = field(default_factory=dict)

    def add(self, key: str, value: str) -> None:
        self.values[key] = value
        self.fulfilled[key] = False

    def add_operand(self, text: str) -> None:
        key, value = parse_assignment(text)
        self.add(key, value)

    def __bool__(self) -> bool:
        return bool(self.values)

    def resolve(self, form_field: FormField) -> str | None:
        """Apply the assignment addressing ``form_field``, if any.

        The fully-qualified name is tried before the decimal object id, and
        only the first matching key is applied. Returns the matched key.
        """
        key = form_field.name
        if key not in self.values:
            key = str(form_field.object_id)
            if key not in self.values:
                return None

        logger.debug("Key %r addresses %r", key, form_field)
        if write_value(form_field, self.values[key]):
            self.fulfilled[key] = True
        return key

    def unfulfilled(self) -> list[str]:
        return sorted(key for key, done in self.fulfilled.items() if not done)
