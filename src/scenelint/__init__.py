"""scenelint: static content-integrity validation for branching gamebooks."""

__version__ = "0.1.0"
