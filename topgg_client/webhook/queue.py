"""Single-consumer queue delivering decoded votes to the application."""

import asyncio
from enum import Enum

import structlog

from ..core.exceptions import VoteQueueFullError
from ..parsers.topgg_models import WebhookVote

logger = structlog.get_logger(__name__)


class OverflowPolicy(str, Enum):
    """What a bounded queue does with a vote that does not fit."""

    DROP_OLDEST = "drop_oldest"  # Evict the oldest pending vote
    REJECT = "reject"  # Refuse the new vote (webhook answers 503)


class VoteQueue:
    """
    FIFO queue of webhook votes for a single consumer.

    With ``max_size=0`` (the default) the queue is unbounded and ``put`` never
    blocks: if the consumer stops draining it, votes pile up in memory. A
    positive ``max_size`` bounds it, and ``overflow`` decides what happens
    when it is full.

    Example:
        >>> queue = VoteQueue(max_size=1000, overflow=OverflowPolicy.DROP_OLDEST)
        >>> queue.put(vote)
        >>> vote = await queue.get()
    """

    def __init__(
        self,
        max_size: int = 0,
        overflow: OverflowPolicy = OverflowPolicy.DROP_OLDEST,
    ):
        """
        Initialize the vote queue.

        Args:
            max_size: Maximum number of pending votes (0 = unbounded)
            overflow: Policy applied when a bounded queue is full

        Raises:
            ValueError: If max_size is negative or overflow is unknown
        """
        if max_size < 0:
            raise ValueError("max_size must be >= 0")

        self.max_size = max_size
        self.overflow = OverflowPolicy(overflow)
        self.dropped = 0
        self._queue: asyncio.Queue[WebhookVote] = asyncio.Queue(maxsize=max_size)

        logger.debug(
            "vote_queue_initialized",
            max_size=max_size,
            overflow=self.overflow.value,
        )

    def put(self, vote: WebhookVote) -> None:
        """
        Enqueue a vote without waiting.

        Args:
            vote: Decoded vote

        Raises:
            VoteQueueFullError: If the queue is full and the policy is REJECT
        """
        try:
            self._queue.put_nowait(vote)
            return
        except asyncio.QueueFull:
            if self.overflow is OverflowPolicy.REJECT:
                logger.warning("vote_queue_full", max_size=self.max_size, policy="reject")
                raise VoteQueueFullError(self.max_size)

        evicted = self._queue.get_nowait()
        self._queue.put_nowait(vote)
        self.dropped += 1
        logger.warning(
            "vote_queue_dropped_oldest",
            max_size=self.max_size,
            dropped_user=evicted.user,
            dropped_total=self.dropped,
        )

    async def get(self) -> WebhookVote:
        """Wait for and return the oldest pending vote."""
        return await self._queue.get()

    def get_nowait(self) -> WebhookVote:
        """
        Return the oldest pending vote without waiting.

        Raises:
            asyncio.QueueEmpty: If no vote is pending
        """
        return self._queue.get_nowait()

    def qsize(self) -> int:
        """Number of pending votes."""
        return self._queue.qsize()

    def empty(self) -> bool:
        """Whether no votes are pending."""
        return self._queue.empty()
