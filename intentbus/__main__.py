"""Entry point for ``python -m intentbus``."""

from intentbus.cli.commands import app

if __name__ == "__main__":
    app()
