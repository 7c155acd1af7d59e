"""WhatsApp lead rotation API."""

__version__ = "1.0.0"
