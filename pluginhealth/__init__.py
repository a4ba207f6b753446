"""Jenkins plugin health: update center ingestion and workflow inspection."""

__version__ = "0.1.0"
