"""Clinical portal views over rehabilitation sensor sessions."""

__version__ = "0.1.0"
