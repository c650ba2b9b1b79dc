"""
Example usage of the top.gg API client.

This example demonstrates how to:
1. Fetch your bot's listing and published stats
2. List recent voters and check a single user's vote
3. Publish an updated server count

Before running:
   export TOPGG_TOKEN="your_token_here"
   export TOPGG_BOT_ID="your_bot_id"

Run with:
    python examples/topgg_usage_example.py
"""

import asyncio
import os

from topgg_client import ClientConfig, LoggingConfig, TopggClient, setup_logging


async def show_bot(client: TopggClient) -> None:
    """Print the listing and stats of the client's bot."""
    print(f"\n{'='*60}")
    print(f"Bot {client.bot_id}")
    print(f"{'='*60}")

    bot = await client.get_my_bot()
    if bot is None:
        print("Could not fetch the bot listing")
        return

    print(f"{bot.username}#{bot.discriminator} ({bot.lib}, prefix {bot.prefix})")
    print(f"  {bot.short_desc}")
    print(f"  Votes: {bot.points} total, {bot.monthly_points} this month")
    print(f"  Owners: {', '.join(str(owner) for owner in bot.owners)}")

    stats = await client.get_my_bot_stats()
    if stats is not None:
        print(f"  Servers: {stats.server_count} across {stats.shard_count or 1} shard(s)")


async def show_voters(client: TopggClient) -> None:
    """Print recent voters and re-check the first one."""
    voters = await client.get_my_votes()
    if voters is None:
        print("Could not fetch voters")
        return

    print(f"\n{len(voters)} recent voters")
    for voter in voters[:5]:
        print(f"  {voter.username} ({voter.id})")

    if voters:
        voted = await client.has_voted_for_me(voters[0].id)
        print(f"\n{voters[0].username} voted in the last 12 hours: {voted}")


async def main():
    """Run the examples."""
    setup_logging(LoggingConfig(level="WARNING", format="text"))

    config = ClientConfig(bot_id=int(os.environ["TOPGG_BOT_ID"]))

    async with TopggClient.from_config(config) as client:
        await show_bot(client)
        await show_voters(client)

        posted = await client.post_bot_stats(server_count=978, shard_count=1)
        print(f"\nServer count published: {posted}")


if __name__ == "__main__":
    asyncio.run(main())
