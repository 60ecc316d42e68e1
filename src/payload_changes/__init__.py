"""Change report for the source repositories of a release payload."""

__version__ = "0.1.0"
