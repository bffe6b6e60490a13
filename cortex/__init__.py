"""Cortex: NYX assistant and offline sync backend."""

__version__ = "0.1.0"
