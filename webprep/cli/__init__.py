"""CLI module for webprep."""
