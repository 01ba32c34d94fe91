"""Flat textual values for form fields, per field variety."""

from __future__ import annotations

import logging
import sys

from pdffill.model.field import ButtonKind, FieldKind, FormField

logger = logging.getLogger(__name__)

BUTTON_PLACEHOLDER = "<button>"
UNKNOWN_PLACEHOLDER = "<unknown-form-element>"
TRUTHY_VALUES = frozenset({"true", "1", "yes"})


def read_value(field: FormField) -> str:
    kind = field.kind
    if kind is FieldKind.TEXT:
        return field.text

    if kind is FieldKind.CHOICE:
        if field.editable:
            return field.text
        options = field.options
        return ",".join(options[index].label for index in field.selected_indices)

    if kind is FieldKind.BUTTON:
        if field.button_kind is ButtonKind.PUSH:
            return BUTTON_PLACEHOLDER
        return "true" if field.checked else "false"

    # signatures and varieties the engine does not model
    return UNKNOWN_PLACEHOLDER


def write_value(field: FormField, value: str) -> bool:
    """Assign ``value`` to ``field``.

    Returns True when the field accepted the value. Read-only and invisible
    fields are never touched. A closed choice without a matching label is
    reported on stderr and left unchanged.
    """
    if field.read_only or not field.visible:
        logger.debug("Skipping %r: read-only or hidden", field)
        return False

    kind = field.kind
    if kind is FieldKind.TEXT:
        field.text = value
    elif kind is FieldKind.CHOICE:
        if field.editable:
            field.text = value
        else:
            labels = [option.label for option in field.options]
            if value not in labels:
                print(f"can't set {field.name} to {value}", file=sys.stderr)
                return False
            field.select(labels.index(value))
            logger.debug("Set %r to %r", field, value)
            return True
    elif kind is FieldKind.BUTTON:
        button_kind = field.button_kind
        if button_kind is ButtonKind.PUSH:
            return True
        if button_kind is ButtonKind.RADIO:
            field.set_radio(field.caption.encode("utf-8") == value.encode("utf-8"))
            logger.debug("Set %r to %r", field, value)
            return True
        field.checked = value in TRUTHY_VALUES
    else:
        return False

    field.commit()
    logger.debug("Set %r to %r", field, value)
    return True
