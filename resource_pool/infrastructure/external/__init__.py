"""External integrations (storage providers)."""
