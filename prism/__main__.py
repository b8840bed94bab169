import argparse
import sys
from functools import reduce
from pathlib import Path
from typing import List, Optional

from prism.prism import Prism
from prism.utilities import eprint
from prism.utilities.configuration import Debug
from prism.utilities.error import EXIT_USAGE


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="prism",
        description="A tree-walking interpreter for a small Lox-like scripting language",
        allow_abbrev=False
    )
    parser.add_argument(
        "-c",
        metavar="STRING",
        type=str,
        required=False,
        help="source string to execute"
    )
    parser.add_argument(
        "source",
        metavar="FILE",
        nargs="*",
        type=str,
        help="the script to interpret; starts a REPL if omitted"
    )
    parser.add_argument(
        "--tokens",
        action="store_true",
        help="show the colour-coded token stream before running"
    )
    parser.add_argument(
        "--graph",
        metavar="PATH",
        type=Path,
        default=None,
        help="write the AST as a GraphViz file, and render it to PNG if `dot` is available"
    )
    parser.add_argument(
        "--dbg",
        choices=tuple(option.name for option in Debug),
        default=list(),
        action="append",
        help="prism debugging options, multiple --dbg arguments can be passed"
    )
    args = parser.parse_args(argv)

    if len(args.source) > 1:
        eprint("Usage: prism [script]")
        return EXIT_USAGE

    flags = reduce(lambda a, b: a | Debug[b], args.dbg, Debug(0))  # Collapse all flags passed.
    if args.tokens:
        flags |= Debug.VISUALIZE_TOKENS

    prism = Prism(flags, graph_path=args.graph)
    if args.c is not None:
        return prism.run_source(args.c)
    if args.source:
        return prism.run_file(args.source[0])
    return prism.run_interactive()


if __name__ == "__main__":
    sys.exit(main())
