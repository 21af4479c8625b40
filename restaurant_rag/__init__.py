"""Multi-tenant hybrid retrieval for restaurant knowledge bases."""

__version__ = "0.1.0"
