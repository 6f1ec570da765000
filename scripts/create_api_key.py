#!/usr/bin/env python3
"""
Script to issue or revoke agent API keys.

Usage:
    python scripts/create_api_key.py --agent-id a1 --name "CI key"
    python scripts/create_api_key.py --revoke <key_id>
"""

import asyncio
import argparse
import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.database import AsyncSessionLocal, init_db, close_db
from app.services.api_key_service import ApiKeyService
from app.core.exceptions import ValidationError


async def issue(agent_id: str, name: str) -> None:
    """Issue a key and print it once."""
    async with AsyncSessionLocal() as session:
        plain_key, api_key = await ApiKeyService.generate(session, agent_id=agent_id, name=name)

    print("\n" + "=" * 70)
    print("API KEY CREATED SUCCESSFULLY")
    print("=" * 70)
    print(f"ID: {api_key.id}")
    print(f"Agent: {api_key.agent_id}")
    print(f"Name: {api_key.name}")
    print(f"Created: {api_key.created_at}")
    print("\n" + "-" * 70)
    print("IMPORTANT: Save this API key now. It will NOT be shown again!")
    print("-" * 70)
    print(f"\nAPI Key: {plain_key}\n")
    print("=" * 70)
    print("\nSend it in the X-API-Key header (or Authorization: Bearer <key>).")
    print("=" * 70 + "\n")


async def revoke(key_id: str) -> bool:
    """Revoke a key; returns False if no such key exists."""
    async with AsyncSessionLocal() as session:
        found = await ApiKeyService.revoke(session, key_id)

    if found:
        print(f"API key {key_id} is revoked.")
    else:
        print(f"No API key with id {key_id}.", file=sys.stderr)
    return found


async def main() -> int:
    """Main function."""
    parser = argparse.ArgumentParser(
        description="Issue or revoke agent API keys"
    )
    parser.add_argument("--agent-id", help="Agent that will own the key")
    parser.add_argument("--name", help="Human-readable label for the key")
    parser.add_argument("--revoke", metavar="KEY_ID", help="Revoke the key with this id instead")

    args = parser.parse_args()

    if not args.revoke and not (args.agent_id and args.name):
        parser.error("--agent-id and --name are required unless --revoke is given")

    await init_db()

    try:
        if args.revoke:
            return 0 if await revoke(args.revoke) else 1
        await issue(args.agent_id, args.name)
        return 0
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        await close_db()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
