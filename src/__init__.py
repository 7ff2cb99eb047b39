# src/__init__.py - v1
"""topicforge: generated learning content per topic, enriched on demand."""

from topicforge.version import __version__

__all__ = ["__version__"]
