"""
Entry point for ``python -m waitwhileslots``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
