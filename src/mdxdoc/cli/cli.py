"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated, Optional

import typer

from mdxdoc.cli.commands import _settings, imports_cmd, parse_cmd, render_cmd, roundtrip_cmd


app = typer.Typer(name="mdxdoc", no_args_is_help=True, help="MDX <-> document tree conversion")


@app.callback()
def main(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Logging level, e.g. DEBUG")] = None,
    ):
    """Configure logging before any command runs."""
    settings = _settings(overrides={"log_level": log_level})
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="parse")(parse_cmd)
app.command(name="render")(render_cmd)
app.command(name="roundtrip")(roundtrip_cmd)
app.command(name="imports")(imports_cmd)
