"""Floor plan engine: walls and openings in, rooms and engineering metadata out."""

__version__ = "0.1.0"
