"""Reading lists: saved-article collections and user history snapshots."""

__version__ = "0.1.0"
