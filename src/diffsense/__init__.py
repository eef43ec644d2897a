"""diffsense — parse, classify and redact git change sets."""

__version__ = "0.3.0"
