"""Notekeeper: personal notes service with ordered note partitions."""

__version__ = "0.1.0"
