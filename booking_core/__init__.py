"""Availability engine and reservation status rules for appointment booking."""

__version__ = "0.1.0"
