"""Request guards for FastAPI routes."""
