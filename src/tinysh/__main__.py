"""Run tinysh with ``python -m tinysh``."""

from tinysh.cli import app

if __name__ == "__main__":
    app()
