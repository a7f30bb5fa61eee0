"""Pull request reviewer assignment: teams, users, reviewer selection, merging and statistics on SQLite."""

__version__ = "0.1.0"