"""shellstrap — idempotent zsh environment bootstrap."""

__version__ = "0.1.0"
