from typing import Optional

import typer

from schema_composer.config import get_config
from schema_composer.utils import setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import schema_composer

        typer.echo(f"Schema Composer version: {schema_composer.__version__}")
        raise typer.Exit()


app = typer.Typer(name="schema-composer", no_args_is_help=True)


@app.callback()
def app_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR).",
        envvar="SCHEMA_COMPOSER_LOG_LEVEL",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Schema Composer - unify schemas discovered from JSON document collections."""
    config = get_config()
    setup_logging(log_level=(log_level or config.log_level).upper(), log_file=config.log_file)
