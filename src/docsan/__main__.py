"""Allow running docsan as ``python -m docsan``."""

from docsan.cli import app

if __name__ == "__main__":
    app()
