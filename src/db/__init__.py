"""Database engine, errors and the bookmark store."""
