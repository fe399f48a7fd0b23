#!/usr/bin/env python3
"""
Example Bot - Registry Presence

This bot demonstrates the registration lifecycle:
1. Registers its endpoint with the discovery registry
2. Keeps re-registering in the background (keepalive)
3. Holds the heartbeat WebSocket open so the registry keeps it online
4. Looks itself up to show what callers see

Usage:
    python scripts/example_bot.py

Configuration via environment:
    BOTCALL_DISCOVERY_URL  registry URL (default http://localhost:8080)
    BOT_ID                 agent id (default "orion")
    BOT_ENDPOINT           advertised endpoint (default localhost:9000)
    BOT_ATTESTATION        attestation token (default empty)
"""

import asyncio
import os
import sys

from botcall.client import RegistryClient
from botcall.errors import RegistryClientError

AGENT_ID = os.getenv("BOT_ID", "orion")
ENDPOINT = os.getenv("BOT_ENDPOINT", "localhost:9000")
ATTESTATION = os.getenv("BOT_ATTESTATION", "")


async def main():
    print("=" * 70)
    print("🤖 BOTCALL BOT STARTING")
    print("=" * 70)
    print(f"Agent ID: {AGENT_ID}")
    print(f"Endpoint: {ENDPOINT}")

    async with RegistryClient() as client:
        print(f"Discovery: {client.base_url}")
        print("=" * 70)

        try:
            # Step 1: Register
            print("\n📝 STEP 1: REGISTRATION")
            result = await client.register(AGENT_ID, ENDPOINT, attestation=ATTESTATION)
            print(f"✅ Registered! Signaling URL: {result.url}")

            # Step 2: Keepalive
            client.start_keepalive(AGENT_ID, ENDPOINT, attestation=ATTESTATION)
            print("🔁 Keepalive re-registration running")

            # Step 3: Self lookup
            lookup = await client.lookup(AGENT_ID)
            print(f"\n🔎 Lookup says: {lookup.status.value} at {lookup.endpoint} ({lookup.mode or 'no mode'})")
            print(f"   Callers can dial: {client.base_url}/v1/lookup/{AGENT_ID}")

            # Step 4: Heartbeat socket
            print("\n💓 STEP 4: HEARTBEAT SESSION (Ctrl+C to quit)")
            async for _ in client.heartbeats(AGENT_ID):
                print("   ping from registry, presence refreshed")

        except RegistryClientError as e:
            print("\n" + "=" * 70)
            print("❌ REGISTRY ERROR")
            print("=" * 70)
            print(f"Error: {e}")
            print("💡 Start the registry with:")
            print("   python -m botcall")
            print("=" * 70)
            sys.exit(1)
        except OSError as e:
            print(f"\n❌ Connection error: {e}")
            sys.exit(1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n\n" + "=" * 70)
        print("👋 BOT SHUTTING DOWN")
        print("=" * 70)
