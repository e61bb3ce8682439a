"""HTTP API for capturing and retrieving bookmarks."""
