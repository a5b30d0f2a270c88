"""Application layer: interfaces and pool services.

Depends on domain, protocol definitions and the reactor bridge; backends
are injected (DIP).
"""
