"""Notekeeper: notes API with one-time-code login and throttled password reset."""

__version__ = "0.1.0"
