"""
Manage pending registrations without the UI. Run from project root:
  python -m eletror.scripts.pending_users list
  python -m eletror.scripts.pending_users approve USERNAME
  python -m eletror.scripts.pending_users reject USERNAME
"""
import argparse
import asyncio
import logging
import sys

from eletror.core.config import get_settings
from eletror.core.database import SessionLocal, init_db
from eletror.core.kv_store import SQLKeyValueStore
from eletror.services.storage import StorageService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


async def run(storage: StorageService, action: str, username: str | None) -> int:
    pending = await storage.get_pending_users()
    if action == "list":
        for name in pending:
            print(name)
        return 0
    if username not in pending:
        print(f"No pending registration for '{username}'.", file=sys.stderr)
        return 1
    if action == "approve":
        await storage.approve_user(username)
        print(f"Approved '{username}'.")
    else:
        await storage.delete_user(username)
        print(f"Rejected '{username}'.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="List, approve or reject pending registrations.")
    parser.add_argument("action", choices=["list", "approve", "reject"])
    parser.add_argument("username", nargs="?", help="Username (required for approve/reject)")
    args = parser.parse_args(argv)

    if args.action != "list" and not (args.username or "").strip():
        parser.error(f"{args.action} requires a username")

    settings = get_settings()
    init_db()
    storage = StorageService.from_settings(SQLKeyValueStore(SessionLocal), settings)
    # No UI is waiting on this; skip the simulated round-trips.
    storage.simulate_latency = False
    try:
        return asyncio.run(run(storage, args.action, (args.username or "").strip() or None))
    except Exception as e:
        logger.exception("Pending users command failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
