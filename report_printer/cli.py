"""
Command line interface for report_printer.

Usage:
    report-printer render report.json -o report.pdf --header "{PAGENUMBER}||Monthly report"
    report-printer demo -o sample.pdf
    report-printer version
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .api import print_report
from .document.flow_document import FlowDocument
from .engine.geometry import DEFAULT_MARGIN
from .engine.text_metrics import TypeStyle
from .exceptions import ReportPrinterError
from .layout.header_footer import HeaderFooterLine, TextSegment
from .layout.page_definition import PageLayoutDefinition
from .renderers.render_utils import PAGE_SIZES, ensure_page_size
from .sample import SAMPLE_TITLE, build_sample_definition, build_sample_document
from .utils.logger import LOG_LEVELS, configure_logging
from .version import __version__

logger = logging.getLogger(__name__)


def parse_line_spec(spec: str, type_style: TypeStyle, font_size: float) -> HeaderFooterLine:
    """
    Parse a ``left|center|right`` header or footer line.

    Empty parts leave that position unused; a spec without ``|`` is a
    centered line.
    """
    if "|" not in spec:
        return HeaderFooterLine.centered(TextSegment(spec, type_style, font_size))

    parts = spec.split("|")
    if len(parts) != 3:
        raise ReportPrinterError("Line spec must be 'left|center|right'", repr(spec))
    segments = [TextSegment(part, type_style, font_size) if part else None for part in parts]
    return HeaderFooterLine(*segments)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="report-printer",
        description="Print paginated reports with headers, footers and repeated table headers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  report-printer demo -o sample.pdf
  report-printer render report.json -o report.pdf --header "Sales||Page {PAGENUMBER}"
  report-printer render report.json -o report.pdf --footer "||Page {PAGENUMBER} of {PAGECOUNT}"
  report-printer version
        """,
    )
    parser.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS, type=str.upper, help="Logging level")
    parser.add_argument("--log-file", help="Also write the log to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_page_options(command: argparse.ArgumentParser) -> None:
        command.add_argument("-o", "--output", required=True, help="Output PDF file")
        command.add_argument("--page-size", default="LETTER", choices=sorted(PAGE_SIZES), type=str.upper)
        command.add_argument("--landscape", action="store_true", help="Rotate the page")
        command.add_argument("--margin", type=float, default=DEFAULT_MARGIN, help="Page margin in points")
        command.add_argument("--no-repeat-headers", action="store_true", help="Do not repeat table header rows")
        command.add_argument("--title", help="PDF title")

    render = subparsers.add_parser("render", help="Print a flow document saved as JSON")
    render.add_argument("input", help="Flow document JSON file")
    add_page_options(render)
    render.add_argument("--header", action="append", default=[], metavar="SPEC", help="Header line 'left|center|right'")
    render.add_argument("--footer", action="append", default=[], metavar="SPEC", help="Footer line 'left|center|right'")
    render.add_argument("--font", default="Times New Roman", help="Header and footer font family")
    render.add_argument("--font-size", type=float, default=10.0, help="Header and footer font size")

    demo = subparsers.add_parser("demo", help="Print the sample report")
    add_page_options(demo)
    demo.add_argument("--repeat", type=int, default=10, help="How many times the sample text is repeated")

    subparsers.add_parser("version", help="Show version")
    return parser


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _run_render(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    if not input_path.exists():
        raise ReportPrinterError("Input file not found", str(input_path))

    document = FlowDocument.load(input_path.read_text(encoding="utf-8"))
    page_size = ensure_page_size(args.page_size, "landscape" if args.landscape else "portrait")
    definition = PageLayoutDefinition(
        page_size.width,
        page_size.height,
        args.margin,
        args.margin,
        args.margin,
        args.margin,
        repeat_table_headers=not args.no_repeat_headers,
    )
    type_style = TypeStyle(family=args.font)
    for spec in args.header:
        definition.add_header_line(parse_line_spec(spec, type_style, args.font_size))
    for spec in args.footer:
        definition.add_footer_line(parse_line_spec(spec, type_style, args.font_size))

    pages = print_report(document, definition, args.output, title=args.title or input_path.stem)
    print(f"{pages} pages written to {args.output}")
    return 0


def _run_demo(args: argparse.Namespace) -> int:
    page_size = ensure_page_size(args.page_size, "landscape" if args.landscape else "portrait")
    definition = build_sample_definition(
        page_size.width,
        page_size.height,
        margin=args.margin,
        repeat_table_headers=not args.no_repeat_headers,
    )
    document = build_sample_document(args.repeat)

    pages = print_report(document, definition, args.output, title=args.title or SAMPLE_TITLE)
    print(f"{pages} pages written to {args.output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    configure_logging(args.log_level, log_file=args.log_file)

    if args.command == "version":
        print(f"report-printer {__version__}")
        return 0

    try:
        if args.command == "render":
            return _run_render(args)
        return _run_demo(args)
    except ReportPrinterError as exc:
        logger.error(str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
