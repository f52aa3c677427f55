"""Intent model, validation, metrics and block-builder bid matching for an intent broadcast network."""

__version__ = "0.1.0"