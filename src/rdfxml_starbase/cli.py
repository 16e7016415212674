"""
Command line front end.

    rdfxml-starbase data.rdf --base http://example.org/ --format ntriples
    rdfxml-starbase data.rdf --reify --format csv --output out.csv
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rdfxml_starbase.config import LOG_LEVELS, OUTPUT_FORMATS, ParserConfig
from rdfxml_starbase.exceptions import RDFXMLError
from rdfxml_starbase.parser import RDFXMLParser
from rdfxml_starbase.serializers import serialize_nquads, serialize_ntriples
from rdfxml_starbase.store import StatementStore

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rdfxml-starbase",
        description="Convert RDF/XML into N-Triples, N-Quads, CSV or Parquet",
    )
    parser.add_argument("source", help="RDF/XML file to parse ('-' for stdin)")
    parser.add_argument("--base", default=None, help="Base URI (defaults to the file URI)")
    parser.add_argument("--reify", action="store_true", default=None,
                        help="Reify statements whose property element has rdf:ID")
    parser.add_argument("--context", default=None,
                        help="Graph IRI attached to every statement (N-Quads graph label)")
    parser.add_argument("--format", dest="output_format", choices=OUTPUT_FORMATS, default=None,
                        help="Output format (default: ntriples)")
    parser.add_argument("--output", "-o", default=None, help="Output file (default: stdout)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None)
    return parser


def write_output(store: StatementStore, output_format: str, output: Optional[str]) -> None:
    if output_format in ("csv", "parquet"):
        df = store.to_dataframe()
        if output_format == "parquet":
            if not output:
                raise RDFXMLError("--output is required for parquet output")
            df.write_parquet(output)
        elif output:
            df.write_csv(output)
        else:
            sys.stdout.write(df.write_csv())
        return

    text = serialize_nquads(store) if output_format == "nquads" else serialize_ntriples(store)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
    else:
        sys.stdout.write(text + "\n")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    try:
        config = ParserConfig.from_env().merged(
            reify=args.reify,
            base=args.base,
            output_format=args.output_format,
            log_level=args.log_level,
        )
        config.validate()
    except RDFXMLError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    store = StatementStore()
    parser = RDFXMLParser(store, reify=config.reify)
    try:
        if args.source == "-":
            parser.parse_string(sys.stdin.read(), config.base, args.context)
        else:
            parser.parse_file(args.source, config.base or None, args.context)
        write_output(store, config.output_format, args.output)
    except (RDFXMLError, OSError) as e:
        logger.debug("Parse failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
