"""termtris: a terminal falling-block puzzle game."""

__version__ = "0.1.0"
