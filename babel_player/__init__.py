"""Audio player with a word-synchronized, multi-language lyrics viewer/editor."""

__version__ = "0.1.0"
