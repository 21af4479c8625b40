"""I/O adapters: relational chunk store, in-memory store and embedding provider client."""
