"""Seed the pool with every file under a directory.

Usage:
    python -m scripts.import_directory <directory>
Files larger than RESOURCE_POOL_MAXIMUM_SIZE are skipped.
"""

import asyncio
import sys
from pathlib import Path

from resource_pool.shared.telemetry.logging import setup_logging
from scripts._pool import open_pool


async def main() -> int:
    """Add the directory tree given on the command line."""
    if len(sys.argv) != 2:
        print("Usage: python -m scripts.import_directory <directory>", file=sys.stderr)
        return 1
    root = Path(sys.argv[1])
    if not root.is_dir():
        print(f"Not a directory: {root}", file=sys.stderr)
        return 1
    setup_logging()
    async with open_pool() as pool:
        added = await pool.add_directory(root)
    for descriptor in added:
        print(f"{descriptor.checksum} {descriptor.size}")
    print(f"Added {len(added)} resources", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
