"""Console entry point for ``python -m quillsh``."""

from .cli import app

if __name__ == "__main__":
    app()
