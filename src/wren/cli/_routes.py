"""``wren routes``: list registered routes.

Prints every registered route in registration order, which is also the
order the matcher tries them in.
"""

import argparse

from wren.cli._resolve import load_app


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATH and HANDLER for ``args.app``."""
    app = load_app(args.app)

    entries = app.registry.entries
    if not entries:
        print("No routes registered.")
        return

    rows = [(str(e.method), e.template, e.descriptor.name) for e in entries]

    max_methods = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    sep_len = max_methods + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, handler_name in rows:
        print(fmt.format(method, path, handler_name))
