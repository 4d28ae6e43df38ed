"""Infrastructure: cache, persistence and their exceptions."""
