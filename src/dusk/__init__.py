"""dusk - disk usage summary for a set of root paths."""

__version__ = "0.1.0"
