"""
Example of receiving vote webhooks from top.gg.

Configure the webhook URL on your bot's edit page as
``http://<your-host>:5000/`` and set the same Authorization secret here.

Before running:
   export TOPGG_WEBHOOK_SECRET="your_webhook_secret"
   export TOPGG_WEBHOOK_PORT=5000          # optional
   export TOPGG_WEBHOOK_MAX_QUEUE_SIZE=1000  # optional, 0 = unbounded

Run with:
    python examples/topgg_webhook_example.py

Use Ctrl+C to stop.
"""

import asyncio

from topgg_client import LoggingConfig, WebhookReceiver, setup_logging


async def main():
    """Print every vote as it arrives."""
    setup_logging(LoggingConfig(level="INFO", format="text"))

    async with WebhookReceiver.from_settings() as receiver:
        print(f"Listening for votes on port {receiver.port}")
        async for vote in receiver:
            multiplier = "x2 weekend" if vote.is_weekend else "x1"
            print(f"[{vote.kind}] user {vote.user} voted for bot {vote.bot} ({multiplier})")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
