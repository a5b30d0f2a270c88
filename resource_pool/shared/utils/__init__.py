"""Shared utilities."""

from resource_pool.shared.utils.generators import generate_operation_id

__all__ = ["generate_operation_id"]
