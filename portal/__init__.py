"""Green Avenue community portal client."""

__version__ = "0.2.0"
