"""CLI entrypoint: Typer app definition and command registration"""

from typing import Annotated

import typer

from mdcheck.cli.commands import check_cmd, index_cmd, init_cmd, list_cmd, taxonomy_cmd
from mdcheck.core.utils.logging import configure_logging


app = typer.Typer(name="mdcheck", no_args_is_help=True, help="Front matter, link, and code fence checks for a Markdown blog")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress to stderr")] = False,
    ):
    """Configure logging before any command runs."""
    if verbose:
        configure_logging("DEBUG")


app.command(name="check")(check_cmd)
app.command(name="init")(init_cmd)
app.command(name="index")(index_cmd)
app.command(name="taxonomy")(taxonomy_cmd)
app.command(name="list")(list_cmd)
