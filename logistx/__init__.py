"""LogistX inventory and order management core."""

__version__ = "0.1.0"
