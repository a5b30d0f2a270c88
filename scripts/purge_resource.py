"""Delete one resource from the pool by SHA-1.

Usage:
    python -m scripts.purge_resource <sha1> [<sha1> ...]
Exit status is 1 if any checksum was invalid or absent.
"""

import asyncio
import sys

from resource_pool.domain.exceptions import InvalidDescriptorError
from resource_pool.shared.telemetry.logging import get_logger, setup_logging
from scripts._pool import open_pool

logger = get_logger(__name__)


async def main() -> int:
    """Delete each checksum given on the command line."""
    if len(sys.argv) < 2:
        print("Usage: python -m scripts.purge_resource <sha1> [<sha1> ...]", file=sys.stderr)
        return 1
    setup_logging()
    status = 0
    async with open_pool() as pool:
        for checksum in sys.argv[1:]:
            try:
                deleted = await pool.delete_resource(checksum)
            except InvalidDescriptorError as e:
                print(e.message, file=sys.stderr)
                status = 1
                continue
            if deleted:
                print(f"Deleted {checksum}")
            else:
                logger.info("Not in pool: %s", checksum)
                print(f"Not found: {checksum}", file=sys.stderr)
                status = 1
    return status


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
