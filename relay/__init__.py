"""Planning Center webhook to push notification relay."""

__version__ = "0.1.0"
