"""Database engine, sessions and bootstrap."""
