"""AcroForm fixtures built with reportlab, plus CLI helpers."""

from __future__ import annotations

from pathlib import Path
import re

import pytest
from pypdf import PdfReader
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from pdffill.cli import main

LISTING_LINE = re.compile(r"^Page (\d+) : (.*) \((\d+)\) = (.*)$")

_WIDTH = 200
_HEIGHT = 20


def _row(index: int) -> float:
    return 720 - index * 40


def _draw_full_form(report: canvas.Canvas, with_radio: bool = True) -> None:
    form = report.acroForm
    common = {"borderWidth": 0, "textColor": colors.black}

    form.textfield(name="name", value="", x=72, y=_row(0), width=_WIDTH, height=_HEIGHT, **common)
    form.checkbox(name="ok", checked=False, x=72, y=_row(1), size=_HEIGHT, buttonStyle="check")
    form.choice(
        name="color",
        value="Red",
        options=["Red", "Green", "Blue"],
        x=72,
        y=_row(2),
        width=_WIDTH,
        height=_HEIGHT,
        **common,
    )
    form.choice(
        name="city",
        value="Paris",
        options=["Paris", "Rome"],
        fieldFlags="combo edit",
        x=72,
        y=_row(3),
        width=_WIDTH,
        height=_HEIGHT,
        **common,
    )
    form.listbox(
        name="fruit",
        value="Apple",
        options=["Apple", "Pear"],
        x=72,
        y=_row(5),
        width=_WIDTH,
        height=2 * _HEIGHT,
        **common,
    )
    form.textfield(
        name="locked",
        value="keep",
        fieldFlags="readOnly",
        x=72,
        y=_row(6),
        width=_WIDTH,
        height=_HEIGHT,
        **common,
    )
    form.textfield(
        name="ghost",
        value="boo",
        annotationFlags="hidden",
        x=72,
        y=_row(7),
        width=_WIDTH,
        height=_HEIGHT,
        **common,
    )
    if with_radio:
        form.radio(name="size", value="small", selected=False, x=72, y=_row(8), size=_HEIGHT)
        form.radio(name="size", value="large", selected=True, x=120, y=_row(8), size=_HEIGHT)


def _save(path: Path, pages: list) -> Path:
    report = canvas.Canvas(str(path), pagesize=letter)
    for draw in pages:
        draw(report)
        report.showPage()
    report.save()
    return path


@pytest.fixture
def form_pdf(tmp_path: Path) -> Path:
    """One page with every field variety, a read-only and a hidden field."""
    return _save(tmp_path / "form.pdf", [_draw_full_form])


@pytest.fixture
def plain_form_pdf(tmp_path: Path) -> Path:
    """Same as ``form_pdf`` without the radio group."""
    return _save(tmp_path / "plain.pdf", [lambda report: _draw_full_form(report, with_radio=False)])


@pytest.fixture
def two_page_pdf(tmp_path: Path) -> Path:
    def first(report: canvas.Canvas) -> None:
        report.acroForm.textfield(name="first", value="", x=72, y=700, width=_WIDTH, height=_HEIGHT)

    def second(report: canvas.Canvas) -> None:
        report.acroForm.textfield(name="second", value="", x=72, y=700, width=_WIDTH, height=_HEIGHT)

    return _save(tmp_path / "two.pdf", [first, second])


@pytest.fixture
def multi_select_pdf(tmp_path: Path) -> Path:
    def draw(report: canvas.Canvas) -> None:
        report.acroForm.listbox(
            name="fruits",
            value=["Apple", "Pear"],
            options=["Apple", "Pear", "Plum"],
            fieldFlags="multiSelect",
            x=72,
            y=600,
            width=_WIDTH,
            height=3 * _HEIGHT,
        )

    return _save(tmp_path / "multi.pdf", [draw])


def stored_value(path: Path, name: str) -> object:
    """Field value as pypdf reads it from the file, independent of PyMuPDF."""
    return PdfReader(str(path)).get_fields()[name].get("/V")


def run_cli(*args: str | Path) -> int:
    return main([str(arg) for arg in args])


def listing(path: Path, capsys: pytest.CaptureFixture[str]) -> list[tuple[int, str, int, str]]:
    """Run ``pdffill -l`` and parse its stdout into (page, name, id, value)."""
    capsys.readouterr()
    assert run_cli("-l", path) == 0
    out = capsys.readouterr().out
    rows = []
    for line in out.splitlines():
        match = LISTING_LINE.match(line)
        assert match, line
        rows.append((int(match.group(1)), match.group(2), int(match.group(3)), match.group(4)))
    return rows


def values_by_name(path: Path, capsys: pytest.CaptureFixture[str]) -> dict[str, list[str]]:
    values: dict[str, list[str]] = {}
    for _, name, _, value in listing(path, capsys):
        values.setdefault(name, []).append(value)
    return values
