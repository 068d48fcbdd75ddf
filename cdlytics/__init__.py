"""Statistics browsing site for the Call of Duty League."""

__version__ = "0.1.0"
