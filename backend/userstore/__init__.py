"""userstore: user record validation and SQLite schema initialisation."""

__version__ = "0.1.0"
