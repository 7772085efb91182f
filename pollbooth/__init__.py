"""pollbooth - polling-station backend for campus elections."""

__version__ = "0.1.0"
