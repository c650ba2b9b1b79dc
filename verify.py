"""Quick verification script to test the setup against the live directory.

Requires TOPGG_TOKEN and TOPGG_BOT_ID in the environment.
"""

import asyncio
import os

import topgg_client
from topgg_client import ClientConfig, LoggingConfig, TopggClient, setup_logging


async def main():
    """Quick verification of the directory client."""
    print("=" * 60)
    print("topgg-client Quick Verification")
    print("=" * 60)

    setup_logging(LoggingConfig(level="WARNING", format="text"))

    print(f"\n✓ Package version: {topgg_client.__version__}")

    bot_id = os.environ.get("TOPGG_BOT_ID")
    if not bot_id:
        print("✗ TOPGG_BOT_ID is not set")
        return False

    try:
        config = ClientConfig(bot_id=int(bot_id))
        client = TopggClient.from_config(config)
    except ValueError as e:
        print(f"✗ Configuration failed: {e}")
        return False

    print(f"✓ Configuration loaded successfully (bot {client.bot_id})")
    print(f"✓ Rate limit: {client.rate_limiter.burst_size} requests per minute")

    print(f"\nTesting directory client against {client.base_url}...")
    async with client:
        bot = await client.get_my_bot()
        if bot is None:
            print("✗ Bot lookup failed (check the token and bot ID)")
            return False
        print(f"✓ Bot lookup successful ({bot.username}, {bot.points} votes)")

        stats = await client.get_my_bot_stats()
        if stats is None:
            print("✗ Stats lookup failed")
            return False
        print(f"✓ Stats lookup successful (server count: {stats.server_count})")

        voters = await client.get_my_voters()
        if voters is None:
            print("✗ Voter lookup failed")
            return False
        print(f"✓ Voter lookup successful ({len(voters)} recent voters)")

    print("\n" + "=" * 60)
    print("All verification checks passed! ✓")
    print("=" * 60)
    return True


if __name__ == "__main__":
    success = asyncio.run(main())
    exit(0 if success else 1)
