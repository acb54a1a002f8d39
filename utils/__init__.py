"""Shared helpers: environment loading, logger setup and reporting frames."""

from .env import load_project_dotenv  # noqa: F401

# Pick up PRICING_* overrides from the project .env once utils is imported.
load_project_dotenv()
