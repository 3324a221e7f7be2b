import argparse
import logging
import sys
from pathlib import Path

from .model.error import Error as ErrorModel
from .output import SERIALIZERS, output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate FHIR profiles from annotated QUICK classes")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="The log level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    parser_generate = subparsers.add_parser("generate", help="generate a profile")
    parser_generate.add_argument(
        "--mappings",
        type=Path,
        required=True,
        help="The YAML or JSON file with the QUICK class and its property mappings",
    )
    parser_generate.add_argument(
        "--metadata",
        type=Path,
        required=True,
        help="The YAML or JSON file with the shared and per-profile metadata",
    )
    parser_generate.add_argument(
        "--types",
        type=Path,
        default=None,
        help="Optional YAML or JSON file extending the FHIR type registry",
    )
    parser_generate.add_argument(
        "--format",
        choices=sorted(SERIALIZERS.keys()),
        default="xml",
        help="The output format (default: xml)",
    )
    parser_generate.add_argument(
        "--output",
        type=Path,
        default=None,
        help="The file to write the profile to (default: stdout)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(name)s - %(levelname)s - %(message)s")

    if args.cmd == "generate":
        result = output(args.mappings, args.metadata, args.format, args.output, args.types)
        if isinstance(result, ErrorModel):
            print(result.model_dump_json(), file=sys.stderr)
            return 1
        if args.output is None:
            print(result)
        return 0

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
