"""mediahub — media type registry and thumbnail pipeline."""

__version__ = "0.1.0"
