"""Allow running as python -m sqzunpack."""

from sqzunpack.cli import app

app()
