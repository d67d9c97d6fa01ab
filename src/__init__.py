"""devbase — package manifest resolution for developer workstations."""

__version__ = "0.1.0"
