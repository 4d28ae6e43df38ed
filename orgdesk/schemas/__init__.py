"""API request/response schemas (Pydantic)."""
