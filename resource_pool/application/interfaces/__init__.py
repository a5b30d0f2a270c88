"""Application interfaces (ports): storage backend protocol.

Define contracts for infrastructure implementations (DIP).
No runtime imports from resource_pool.infrastructure.
"""

from resource_pool.application.interfaces.storage import IBlobBackend

__all__ = ["IBlobBackend"]
