"""
ProgressManager - keepalive progress notifications for running tools.

Generation calls can take minutes. While a tool executes, a ProgressChannel
emits a tick every interval so the caller sees the call is alive, whether or
not the tool reports progress itself.

Design decisions:
- One asyncio task per channel; channels share nothing but the sender
- Ticks are scheduled against absolute deadlines (start + k * interval)
- stop() clears the active flag and cancels the task before its first
  suspension point, so no intermediate tick can follow it
- Channels are keyed by progress token; a second start on a token that is
  still ticking runs detached (ticks computed, never sent)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Union

logger = logging.getLogger(__name__)

ProgressToken = Union[str, int]

PROGRESS_MESSAGES = (
    "🎨 {name} - Preparing your creative request...",
    "⚡ {name} - Connecting to Gemini AI models...",
    "🔄 {name} - Generating content (this may take a moment)...",
    "⏳ {name} - Still processing... Quality results take time...",
    "🎯 {name} - Finalizing your media output...",
)

STATUS_EXCERPT_LENGTH = 100
PROGRESS_COMPLETE = 100
DEFAULT_INTERVAL_SECONDS = 25.0


@dataclass(frozen=True)
class ProgressTick:
    """One progress notification."""
    token: Optional[ProgressToken]
    sequence_number: int
    message: str
    total: Optional[int] = None


ProgressSender = Callable[[ProgressTick], Awaitable[None]]
StatusSource = Callable[[], str]


class ProgressChannel:
    """Ticking notifier bound to one tool invocation."""

    def __init__(
        self,
        operation_name: str,
        token: Optional[ProgressToken],
        sender: Optional[ProgressSender],
        interval: float = DEFAULT_INTERVAL_SECONDS,
        status_source: Optional[StatusSource] = None,
    ):
        self.operation_name = operation_name
        self.token = token
        self.interval = interval
        self.step = 0
        self.active = False
        self._sender = sender
        self._status_source = status_source
        self._task: Optional[asyncio.Task] = None
        self._started_at = 0.0
        self._stopped = False

    @property
    def transmitting(self) -> bool:
        """Whether ticks leave the process (requires a token and a sender)."""
        return self.token is not None and self._sender is not None

    async def start(self) -> None:
        """Send the initial tick and begin periodic ticking."""
        loop = asyncio.get_running_loop()
        self.active = True
        self._started_at = loop.time()

        if self.transmitting:
            await self._send(ProgressTick(
                token=self.token,
                sequence_number=0,
                message=f"🎨 Starting {self.operation_name}",
            ))

        self._task = asyncio.create_task(
            self._run(), name=f"progress:{self.operation_name}"
        )

    def next_tick(self) -> ProgressTick:
        """Advance the step counter and build the tick for this step."""
        self.step += 1
        template = PROGRESS_MESSAGES[(self.step - 1) % len(PROGRESS_MESSAGES)]
        message = template.format(name=self.operation_name)

        status = self._status_source() if self._status_source else ""
        excerpt = (status or "")[-STATUS_EXCERPT_LENGTH:].strip()
        if excerpt:
            message = f"{message}\n📝 Status: ...{excerpt}"

        return ProgressTick(token=self.token, sequence_number=self.step, message=message)

    async def stop(self, success: bool = True) -> None:
        """
        Stop ticking and send the terminal tick.

        Safe to call more than once; only the first call has an effect.
        """
        if self._stopped:
            return
        self._stopped = True
        self.active = False

        task = self._task
        if task is not None:
            task.cancel()
            await asyncio.wait([task])

        if self.transmitting:
            message = (
                f"✅ {self.operation_name} completed successfully!"
                if success else f"❌ {self.operation_name} failed"
            )
            # Progress must keep increasing past long runs of intermediate ticks
            final = max(PROGRESS_COMPLETE, self.step + 1)
            await self._send(ProgressTick(
                token=self.token,
                sequence_number=final,
                message=message,
                total=final,
            ))

    def abandon(self) -> None:
        """Stop without a terminal tick (the invocation was cancelled)."""
        self._stopped = True
        self.active = False
        if self._task is not None:
            self._task.cancel()

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            deadline = self._started_at + (self.step + 1) * self.interval
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            if not self.active:
                return

            tick = self.next_tick()
            if self.transmitting:
                await self._send(tick)

    async def _send(self, tick: ProgressTick) -> None:
        try:
            await self._sender(tick)
        except Exception as e:
            logger.error(f"Failed to send progress notification: {e}")


class ProgressManager:
    """Creates progress channels and tracks which tokens are ticking."""

    def __init__(
        self,
        sender: Optional[ProgressSender] = None,
        interval: float = DEFAULT_INTERVAL_SECONDS
    ):
        """
        Initialize manager.

        Args:
            sender: Coroutine delivering ticks to the caller (None = never send)
            interval: Seconds between keepalive ticks
        """
        self.sender = sender
        self.interval = interval
        self._channels: Dict[ProgressToken, ProgressChannel] = {}

    def is_active(self, token: ProgressToken) -> bool:
        return token in self._channels

    async def start(
        self,
        operation_name: str,
        token: Optional[ProgressToken] = None,
        status_source: Optional[StatusSource] = None
    ) -> ProgressChannel:
        """
        Start a channel for an invocation.

        Args:
            operation_name: Tool being executed
            token: Caller-supplied progress token, if any
            status_source: Returns the latest status reported by the tool

        Returns:
            The started ProgressChannel
        """
        sender = self.sender
        if token is not None and token in self._channels:
            logger.warning(
                f"Progress token {token!r} already in use; "
                f"{operation_name} will run without progress notifications"
            )
            sender = None

        channel = ProgressChannel(
            operation_name,
            token,
            sender,
            interval=self.interval,
            status_source=status_source,
        )
        if channel.transmitting:
            self._channels[token] = channel

        try:
            await channel.start()
        except BaseException:
            # Cancelled while sending the initial tick; the caller never
            # receives the channel, so it cannot stop it
            channel.abandon()
            self._release(channel)
            raise
        return channel

    async def stop(self, channel: ProgressChannel, success: bool = True) -> None:
        """Stop a channel and release its token."""
        try:
            await channel.stop(success)
        finally:
            self._release(channel)

    def _release(self, channel: ProgressChannel) -> None:
        if channel.token is not None and self._channels.get(channel.token) is channel:
            del self._channels[channel.token]
