"""``wren schema``: print or write the OpenAPI document."""

import argparse
import sys
from pathlib import Path

from wren.cli._resolve import load_app
from wren.codec import JSONCodec


def run_schema(args: argparse.Namespace) -> None:
    """Generate the OpenAPI document for ``args.app``.

    Output goes to stdout unless ``args.output`` names a file.
    """
    app = load_app(args.app)
    document = app.schema()
    indent = args.indent if args.indent > 0 else None
    payload = JSONCodec(indent=indent).encode(document)

    if args.output:
        Path(args.output).write_bytes(payload + b"\n")
        print(f"Wrote {args.output}", file=sys.stderr)
        return

    sys.stdout.write(payload.decode("utf-8") + "\n")
