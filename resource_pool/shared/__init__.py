"""Shared cross-cutting helpers (logging, id generation)."""
