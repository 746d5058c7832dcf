"""Pick & Go - client for the vehicle rental marketplace."""

__version__ = "1.0.0"
