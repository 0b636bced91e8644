"""relflow: release versioning and publish workflow."""

__version__ = "0.1.0"
