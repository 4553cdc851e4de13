"""dbv - database schema diagrams from live database metadata."""

__version__ = "0.1.0"
