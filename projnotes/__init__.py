"""Per-project notes kept in a JSON file, with a command line and a terminal UI."""

__version__ = "0.1.0"