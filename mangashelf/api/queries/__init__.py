"""Request handlers used by the API routes."""
