"""Priority-based appointment scheduling for a single doctor's calendar."""

__version__ = "0.1.0"
