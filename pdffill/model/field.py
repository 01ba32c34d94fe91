"""Form field model over PyMuPDF widgets."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re

import fitz

ANNOT_HIDDEN = 1 << 1
ANNOT_NO_VIEW = 1 << 5
FIELD_READ_ONLY = 1 << 0
CHOICE_EDIT = 1 << 18

_REFERENCE = re.compile(r"(\d+)\s+\d+\s+R")
_NAME_DELIMITERS = "#()<>[]{}/%"
_ESCAPES = {"n": 0x0A, "r": 0x0D, "t": 0x09, "b": 0x08, "f": 0x0C, "(": 0x28, ")": 0x29, "\\": 0x5C}


class FieldKind(str, Enum):
    TEXT = "text"
    CHOICE = "choice"
    BUTTON = "button"
    SIGNATURE = "signature"
    UNKNOWN = "unknown"


class ButtonKind(str, Enum):
    PUSH = "push"
    CHECKBOX = "checkbox"
    RADIO = "radio"


_WIDGET_KINDS: dict[int, tuple[FieldKind, ButtonKind | None]] = {
    fitz.PDF_WIDGET_TYPE_TEXT: (FieldKind.TEXT, None),
    fitz.PDF_WIDGET_TYPE_COMBOBOX: (FieldKind.CHOICE, None),
    fitz.PDF_WIDGET_TYPE_LISTBOX: (FieldKind.CHOICE, None),
    fitz.PDF_WIDGET_TYPE_BUTTON: (FieldKind.BUTTON, ButtonKind.PUSH),
    fitz.PDF_WIDGET_TYPE_CHECKBOX: (FieldKind.BUTTON, ButtonKind.CHECKBOX),
    fitz.PDF_WIDGET_TYPE_RADIOBUTTON: (FieldKind.BUTTON, ButtonKind.RADIO),
    fitz.PDF_WIDGET_TYPE_SIGNATURE: (FieldKind.SIGNATURE, None),
}


@dataclass(slots=True, frozen=True)
class ChoiceOption:
    export: str
    label: str


class FormField:
    """One interactive control on a page.

    Wraps a ``fitz.Widget`` and exposes only what the codec needs: identity,
    variety, flags, and per-variety state. Mutators change the in-memory
    widget; ``commit`` pushes the change into the document's object model.
    Radio state and choice selections are read from and written to the field
    dictionaries directly, since a group shares one ``/V`` among its widgets.

    PyMuPDF widgets only hold a weak reference to their page, so the field
    keeps ``page`` alive for as long as it is used.
    """

    def __init__(self, widget: fitz.Widget, page: fitz.Page, page_index: int) -> None:
        self._widget = widget
        self._page = page
        self.page_index = page_index

    @property
    def name(self) -> str:
        return self._widget.field_name or ""

    @property
    def object_id(self) -> int:
        return self._widget.xref

    @property
    def kind(self) -> FieldKind:
        return _WIDGET_KINDS.get(self._widget.field_type, (FieldKind.UNKNOWN, None))[0]

    @property
    def button_kind(self) -> ButtonKind | None:
        return _WIDGET_KINDS.get(self._widget.field_type, (FieldKind.UNKNOWN, None))[1]

    @property
    def read_only(self) -> bool:
        return bool(int(self._widget.field_flags or 0) & FIELD_READ_ONLY)

    @property
    def visible(self) -> bool:
        return not self._annotation_flags() & (ANNOT_HIDDEN | ANNOT_NO_VIEW)

    @property
    def editable(self) -> bool:
        if self._widget.field_type != fitz.PDF_WIDGET_TYPE_COMBOBOX:
            return False
        return bool(int(self._widget.field_flags or 0) & CHOICE_EDIT)

    @property
    def text(self) -> str:
        value = self._widget.field_value
        if value is None:
            return ""
        return str(value)

    @text.setter
    def text(self, value: str) -> None:
        self._widget.field_value = value

    @property
    def options(self) -> list[ChoiceOption]:
        options: list[ChoiceOption] = []
        for item in self._widget.choice_values or []:
            if isinstance(item, (list, tuple)):
                export, label = str(item[0]), str(item[1])
            else:
                export = label = str(item)
            options.append(ChoiceOption(export=export, label=label))
        return options

    @property
    def selected_indices(self) -> list[int]:
        kind, value = self._inherited_key("V")
        if kind == "array":
            selected = set(parse_pdf_strings(value))
        elif kind == "name":
            selected = {value[1:]}
        elif kind == "string" and value:
            selected = {value}
        else:
            return []
        return [
            index
            for index, option in enumerate(self.options)
            if option.export in selected or option.label in selected
        ]

    def select(self, index: int) -> None:
        """Make option ``index`` the sole selection and commit it."""
        self._widget.field_value = self.options[index].export
        self.commit()
        holder = self._field_holder("I")
        if holder is not None:
            self._document.xref_set_key(holder, "I", "null")

    @property
    def checked(self) -> bool:
        kind, value = self._document.xref_get_key(self.object_id, "AS")
        return kind == "name" and value not in ("/Off", "")

    @checked.setter
    def checked(self, value: bool) -> None:
        self._widget.field_value = bool(value)

    def set_radio(self, selected: bool) -> None:
        """Turn this radio member on or off without disturbing its siblings' choice."""
        document = self._document
        on_state = pdf_name(self.caption)
        group = self._parent_xref() or self.object_id
        _, current = document.xref_get_key(group, "V")

        if selected:
            for kid in self._siblings(group):
                document.xref_set_key(kid, "AS", "/Off")
            document.xref_set_key(self.object_id, "AS", on_state)
            document.xref_set_key(group, "V", on_state)
        else:
            document.xref_set_key(self.object_id, "AS", "/Off")
            if current == on_state:
                document.xref_set_key(group, "V", "/Off")

    @property
    def caption(self) -> str:
        state = self._widget.on_state()
        if not state:
            return ""
        return str(state)

    def commit(self) -> None:
        self._widget.update()

    @property
    def _document(self) -> fitz.Document:
        return self._page.parent

    def _annotation_flags(self) -> int:
        kind, value = self._document.xref_get_key(self.object_id, "F")
        if kind != "int":
            return 0
        return int(value)

    def _parent_xref(self, xref: int | None = None) -> int | None:
        kind, value = self._document.xref_get_key(self.object_id if xref is None else xref, "Parent")
        if kind != "xref":
            return None
        return int(value.split()[0])

    def _field_holder(self, key: str) -> int | None:
        """Xref of the nearest dictionary in the field tree that defines ``key``."""
        xref: int | None = self.object_id
        seen: set[int] = set()
        while xref is not None and xref not in seen:
            seen.add(xref)
            kind, _ = self._document.xref_get_key(xref, key)
            if kind != "null":
                return xref
            xref = self._parent_xref(xref)
        return None

    def _inherited_key(self, key: str) -> tuple[str, str]:
        holder = self._field_holder(key)
        if holder is None:
            return "null", "null"
        return self._document.xref_get_key(holder, key)

    def _siblings(self, group: int) -> list[int]:
        kind, value = self._document.xref_get_key(group, "Kids")
        if kind != "array":
            return []
        return [int(number) for number in _REFERENCE.findall(value) if int(number) != self.object_id]

    def __repr__(self) -> str:
        return f"FormField(name={self.name!r}, object_id={self.object_id}, kind={self.kind.value})"


def pdf_name(text: str) -> str:
    """Encode ``text`` as a PDF name object, escaping delimiters with ``#xx``."""
    encoded = []
    for byte in text.encode("utf-8"):
        char = chr(byte)
        if 0x21 <= byte <= 0x7E and char not in _NAME_DELIMITERS:
            encoded.append(char)
        else:
            encoded.append(f"#{byte:02X}")
    return "/" + "".join(encoded)


def parse_pdf_strings(source: str) -> list[str]:
    """Decode the literal and hex strings of a PDF array such as ``[(A)<42>]``."""
    strings: list[str] = []
    index = 0
    while index < len(source):
        char = source[index]
        if char == "(":
            raw, index = _read_literal(source, index + 1)
            strings.append(_decode_text(raw))
        elif char == "<":
            end = source.index(">", index)
            digits = "".join(source[index + 1 : end].split())
            if len(digits) % 2:
                digits += "0"
            strings.append(_decode_text(bytes.fromhex(digits)))
            index = end + 1
        else:
            index += 1
    return strings


def _read_literal(source: str, index: int) -> tuple[bytes, int]:
    out = bytearray()
    depth = 1
    while index < len(source):
        char = source[index]
        index += 1
        if char == "\\":
            if index >= len(source):
                break
            escaped = source[index]
            index += 1
            if escaped in _ESCAPES:
                out.append(_ESCAPES[escaped])
            elif escaped in "01234567":
                digits = escaped
                while len(digits) < 3 and index < len(source) and source[index] in "01234567":
                    digits += source[index]
                    index += 1
                out.append(int(digits, 8) & 0xFF)
            elif escaped == "\r":
                if index < len(source) and source[index] == "\n":
                    index += 1
            elif escaped != "\n":
                out.extend(escaped.encode("latin-1", "replace"))
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                break
        out.extend(char.encode("latin-1", "replace"))
    return bytes(out), index


def _decode_text(raw: bytes) -> str:
    if raw.startswith(b"\xfe\xff"):
        return raw[2:].decode("utf-16-be", "replace")
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw[3:].decode("utf-8", "replace")
    return raw.decode("latin-1")
