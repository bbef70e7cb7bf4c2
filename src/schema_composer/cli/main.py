"""Main CLI entry point for schema-composer."""  # pragma: no cover

from schema_composer.cli.app import app  # pragma: no cover

# Register commands
from schema_composer.cli.commands import compose  # noqa: F401  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    # start the app
    app()
