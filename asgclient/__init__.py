"""Auto Scaling query API client: signing, retrying transport, models and operations."""

__version__ = "0.1.0"
__all__ = ["attempt", "transport", "signing", "models", "client"]