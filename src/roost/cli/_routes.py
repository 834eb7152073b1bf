"""``roost routes`` — list route definitions.

Prints every route of a table in the order patterns are tried, with the
script each resolves to and the modules it composes.
"""

import argparse
import sys

from roost.cli._resolve import resolve_route_table


def run_routes(args: argparse.Namespace) -> None:
    """Print a PATTERN / SCRIPT / MODULES table for ``args.app``."""
    try:
        table = resolve_route_table(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    definitions = table.definitions
    if not definitions:
        print("No routes registered.")
        return

    rows = [
        (d.pattern, d.script or "(default Module)", ", ".join(d.modules) or "-")
        for d in definitions
    ]

    max_pattern = max(max(len(r[0]) for r in rows), 7)  # "PATTERN" header
    max_script = max(max(len(r[1]) for r in rows), 6)  # "SCRIPT" header

    fmt = f"{{:<{max_pattern}}}  {{:<{max_script}}}  {{}}"
    print(fmt.format("PATTERN", "SCRIPT", "MODULES"))
    sep_len = max_pattern + max_script + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for pattern, script, modules in rows:
        print(fmt.format(pattern, script, modules))
