"""logicem — call-center back-office for campaigns, call results and tasks."""

__version__ = "0.1.0"
