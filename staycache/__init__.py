"""StayCache: two-tier hotel data cache and resilient search provider client."""

__version__ = "0.1.0"
