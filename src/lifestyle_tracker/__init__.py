"""lifestyle-tracker: weekly workout grid, session log and goal tracking."""

__version__ = "0.1.0"
