"""eventsearch — console walkthrough of a hosted search-index service."""

__version__ = "0.1.0"
