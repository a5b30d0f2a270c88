"""Operation id generator (CUID2).

Ids are short, collision-resistant and safe to generate from any thread;
they tag every dispatched pool operation and its delivered outcome.
"""

from cuid2 import cuid_wrapper

OPERATION_ID_LENGTH = 16

_operation_id = cuid_wrapper()


def generate_operation_id() -> str:
    """Return a new operation id, e.g. "op_tz4a98xxat96iws9"."""
    return f"op_{_operation_id()[:OPERATION_ID_LENGTH]}"
