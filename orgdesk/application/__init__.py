"""Application layer: read models returned by repositories."""
