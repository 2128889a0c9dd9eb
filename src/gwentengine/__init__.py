"""Rules engine and AI opponent for a Gwent-style round-based card battle."""

__version__ = "0.1.0"
