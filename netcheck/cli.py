"""netcheck command-line interface.

    netcheck circuit.net                  # Check and expand a netlist
    netcheck check circuit.net -e f0      # f0 defined by the equation solver
    netcheck circuit.net --list           # Print the flat netlist
    netcheck info MLIN                    # Show a registry entry
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from netcheck import __version__
from netcheck.checker.pipeline import check_netlist
from netcheck.checker.schema import DEFINITIONS, VARIABLE_NODES
from netcheck.logging import logger as package_logger
from netcheck.netlist.parser import parse_netlist
from netcheck.netlist.writer import format_netlist, netlist_status

logger = logging.getLogger(__name__)

COMMANDS = ("check", "info")


def setup_logging(verbose: int = 0, quiet: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if quiet:
        level = logging.WARNING
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Route package records (checker errors included) through the root handler
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    package_logger.setLevel(level)

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def cmd_check(args: argparse.Namespace) -> int:
    """Check a netlist file."""
    path = Path(args.netlist)
    if not path.exists():
        print(f"Error: Netlist file not found: {path}", file=sys.stderr)
        return 1

    try:
        netlist = parse_netlist(path)
    except SyntaxError as e:
        print(f"Error: {path}: {e}", file=sys.stderr)
        return 1

    result = check_netlist(netlist, equation_variables=args.equation)
    if not result.is_valid:
        print(f"{path}: {result.error_count} error(s) found", file=sys.stderr)
        return 1

    if args.status:
        for type_, count in netlist_status(netlist).items():
            print(f"  {count} {type_} instances")
    if args.list:
        print(format_netlist(netlist), end="")
    logger.info(f"{path}: netlist OK")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Show the statement types known to the checker."""
    if args.type:
        found = [d for d in DEFINITIONS if d.type == args.type]
        if not found:
            print(f"Error: Unknown statement type: {args.type}", file=sys.stderr)
            return 1
        for definition in found:
            nodes = "variable" if definition.nodes == VARIABLE_NODES else definition.nodes
            prefix = "." if definition.action else ""
            print(f"{prefix}{definition.type}")
            print("-" * 40)
            print(f"Nodes: {nodes}")
            print(f"Nonlinear: {definition.nonlinear}")
            for label, props in (("Required", definition.required), ("Optional", definition.optional)):
                for prop in props:
                    rng = f" [{prop.range.lo:g},{prop.range.hi:g}]" if prop.range else ""
                    print(f"{label}: {prop.key} ({prop.kind.value}){rng}")
        return 0

    print(f"netcheck {__version__}")
    print("-" * 40)
    for definition in DEFINITIONS:
        prefix = "." if definition.action else ""
        print(f"{prefix}{definition.type}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="netcheck",
        description="netcheck: semantic checker and subcircuit expander for circuit netlists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  netcheck circuit.net                  Check a netlist
  netcheck circuit.net -e f0 -e Rload   Names defined by equations
  netcheck circuit.net --list           Print the expanded netlist
  netcheck info BJT                     Show the properties of a type
        """,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv)"
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress non-error output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Check command
    check_parser = subparsers.add_parser("check", help="Check a netlist")
    check_parser.add_argument("netlist", help="Netlist file")
    check_parser.add_argument(
        "-e",
        "--equation",
        action="append",
        default=[],
        metavar="NAME",
        help="Variable defined by the equation solver (repeatable)",
    )
    check_parser.add_argument("--list", action="store_true", help="Print the expanded netlist")
    check_parser.add_argument(
        "--status", action="store_true", help="Print instance counts per type"
    )
    check_parser.set_defaults(func=cmd_check)

    # Info command
    info_parser = subparsers.add_parser("info", help="Show known statement types")
    info_parser.add_argument("type", nargs="?", help="Statement type")
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()

    if argv is None:
        argv = sys.argv[1:]

    # If first arg is a file path (not a subcommand), insert 'check'
    if argv and not argv[0].startswith("-") and argv[0] not in COMMANDS:
        argv = ["check"] + list(argv)

    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.quiet)

    if hasattr(args, "func"):
        return args.func(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
