"""agentwait - get notified when your coding agent is waiting for you."""

__version__ = "1.0.0"
