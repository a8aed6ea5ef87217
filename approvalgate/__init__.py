"""Manual approval gate for GitHub Actions workflow runs."""

__version__ = "0.1.0"
