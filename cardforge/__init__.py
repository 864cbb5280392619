"""cardforge: turn free-form study notes into structured flashcards."""

__version__ = "0.1.0"
