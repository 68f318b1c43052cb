"""taskboard: task/workflow board with dependency links and auto-arrange."""

__version__ = "0.3.0"
