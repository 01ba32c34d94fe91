"""pdffill [-l] [-F] [-s FIELD=VALUE]... SRC [DST]: PDF form fill utility."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
import sys

from pdffill.config import FillOptions
from pdffill.pdf.codec import read_value, write_value
from pdffill.pdf.loader import PdfLoadError, load_pdf
from pdffill.pdf.writer import PdfWriteError, write_pdf_with_changes
from pdffill.state.session import AssignmentError, AssignmentSession

logger = logging.getLogger(__name__)

USAGE_ERROR = 1


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(USAGE_ERROR, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="pdffill",
        description="PDF form fill utility",
        epilog="The result is saved to DST, or standard output when DST is '-'.",
    )
    parser.add_argument("src", nargs="?", help="source file")
    parser.add_argument("dst", nargs="?", help="destination file")
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    parser.add_argument("-l", dest="list_fields", action="store_true", help="list form fields")
    parser.add_argument(
        "-F", dest="fill_names", action="store_true", help="fill form fields with names"
    )
    parser.add_argument(
        "-s",
        dest="assignments",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="set form field to value",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def parse_options(argv: Sequence[str] | None = None) -> FillOptions | None:
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)
    if args.src is None:
        parser.print_help(sys.stderr)
        return None

    return FillOptions(
        source=args.src,
        destination=args.dst,
        list_fields=args.list_fields,
        fill_names=args.fill_names,
        assignments=tuple(args.assignments),
        verbose=args.verbose,
    )


def build_session(operands: Sequence[str]) -> AssignmentSession:
    session = AssignmentSession()
    for operand in operands:
        try:
            session.add_operand(operand)
        except AssignmentError:
            print(f"not an assigment {operand}", file=sys.stderr)
    return session


def run(options: FillOptions) -> int:
    session = build_session(options.assignments)

    try:
        document = load_pdf(options.source)
    except PdfLoadError as exc:
        logger.debug("%s", exc)
        return 1

    with document:
        page_count = document.page_count
        if options.list_fields:
            print(f"{page_count} pages total", file=sys.stderr)

        for page_index in range(page_count):
            for field in document.fields(page_index):
                if options.list_fields:
                    print(
                        f"Page {page_index + 1} : {field.name} ({field.object_id}) = "
                        f"{read_value(field)}"
                    )
                if options.fill_names:
                    write_value(field, field.name)
                if session:
                    session.resolve(field)

        for key in session.unfulfilled():
            print(f"{key} not found!", file=sys.stderr)

        if not options.should_write:
            return 0

        if options.to_stdout:
            sys.stdout.flush()
            output = sys.stdout.buffer
        else:
            output = options.destination
        try:
            write_pdf_with_changes(document, output)
        except PdfWriteError as exc:
            logger.debug("%s", exc, exc_info=exc.__cause__)
            print("failed to convert.", file=sys.stderr)
            return 1

    return 0


def main(argv: Sequence[str] | None = None) -> int:
    options = parse_options(argv)
    if options is None:
        return USAGE_ERROR

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run(options)


if __name__ == "__main__":
    sys.exit(main())
