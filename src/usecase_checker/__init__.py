"""Use-case and BDD scenario documentation checker."""

__version__ = "0.1.0"
