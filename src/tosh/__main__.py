"""Entry point for ``python -m tosh``."""

from __future__ import annotations

from tosh.cli.app import app

if __name__ == "__main__":
    app(prog_name="tosh")
