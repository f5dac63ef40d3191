"""UniFlow: a smart student planner with AI task breakdown."""

__version__ = "0.1.0"
