"""
TimeTracker Backend - Partitioned Rate Limiting
================================================

What:  In-memory limiters with queueing, grouped into named policies, and
       the FastAPI dependency that applies a policy to a route.
How:   A policy maps each request to a partition key; every partition owns
       one limiter, created on first use. A request that cannot get a
       permit waits in the partition's queue (oldest first). When the queue
       is also full it is rejected with RateLimitExceededError (→ 429).

Limiter kinds:
    ConcurrencyLimiter   at most N requests in flight; a permit is returned
                         when the request finishes
    FixedWindowLimiter   at most N requests per window of W seconds
    TokenBucketLimiter   bucket of N tokens, refilled by K tokens every P seconds
    NoLimiter            always grants

Policies (see RateLimiterRegistry.from_settings):
    get      concurrency limiter, single partition
    users    no limiter
    modify   partition "token" (token bucket) when the request carries a non-empty
             `token` header, partition "default" (fixed window) otherwise

Limits are per process. State is lost on restart and not shared between
workers.
"""

import asyncio
import logging
import math
import time
from collections import deque
from typing import AsyncGenerator, Callable, Deque, Dict, Iterable, Optional

from fastapi import Request

from timetracker.config import Settings, settings
from timetracker.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


# ══════════════════════════════════════════════════════════════════════════
# Limiters
# ══════════════════════════════════════════════════════════════════════════

class NoLimiter:
    """Grants every request immediately."""

    retry_after = 0

    async def acquire(self) -> bool:
        return True

    def release(self) -> None:
        pass


class ConcurrencyLimiter:
    """
    Caps the number of requests running at the same time.

    A released permit goes straight to the oldest queued waiter, so a new
    arrival never overtakes the queue.
    """

    retry_after = 1

    def __init__(self, permit_limit: int, queue_limit: int):
        self.permit_limit = permit_limit
        self.queue_limit = queue_limit
        self._available = permit_limit
        self._waiters: Deque[asyncio.Future] = deque()

    @property
    def queued(self) -> int:
        return len(self._waiters)

    async def acquire(self) -> bool:
        if self._available > 0 and not self._waiters:
            self._available -= 1
            return True
        if len(self._waiters) >= self.queue_limit:
            return False

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # Permit was handed over just before cancellation
                self.release()
            elif waiter in self._waiters:
                self._waiters.remove(waiter)
            raise
        return True

    def release(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        self._available = min(self._available + 1, self.permit_limit)


class _QueuedLimiter:
    """
    Base for time-based limiters.

    Subclasses implement _try_take() and _seconds_until_permit(). Queued
    callers are served in arrival order through an asyncio.Lock, whose
    waiters are woken first-in first-out.
    """

    def __init__(self, queue_limit: int, clock: Clock = time.monotonic):
        self.queue_limit = queue_limit
        self._clock = clock
        self._queued = 0
        self._lock = asyncio.Lock()

    @property
    def queued(self) -> int:
        return self._queued

    @property
    def retry_after(self) -> int:
        return max(1, math.ceil(self._seconds_until_permit()))

    async def acquire(self) -> bool:
        if self._queued == 0 and self._try_take():
            return True
        if self._queued >= self.queue_limit:
            return False

        self._queued += 1
        try:
            async with self._lock:
                while not self._try_take():
                    await asyncio.sleep(self._seconds_until_permit())
        finally:
            self._queued -= 1
        return True

    def release(self) -> None:
        # Time-based permits are not returned
        pass

    def _try_take(self) -> bool:
        raise NotImplementedError

    def _seconds_until_permit(self) -> float:
        raise NotImplementedError


class FixedWindowLimiter(_QueuedLimiter):
    """At most `permit_limit` requests per `window_seconds`."""

    def __init__(
        self,
        permit_limit: int,
        window_seconds: float,
        queue_limit: int,
        clock: Clock = time.monotonic,
    ):
        super().__init__(queue_limit, clock)
        self.permit_limit = permit_limit
        self.window_seconds = window_seconds
        self._window_start = clock()
        self._used = 0

    def _roll_window(self) -> None:
        elapsed = self._clock() - self._window_start
        if elapsed >= self.window_seconds:
            windows = math.floor(elapsed / self.window_seconds)
            self._window_start += windows * self.window_seconds
            self._used = 0

    def _try_take(self) -> bool:
        self._roll_window()
        if self._used < self.permit_limit:
            self._used += 1
            return True
        return False

    def _seconds_until_permit(self) -> float:
        self._roll_window()
        if self._used < self.permit_limit:
            return 0.0
        return self._window_start + self.window_seconds - self._clock()


class TokenBucketLimiter(_QueuedLimiter):
    """Bucket of `token_limit` tokens, topped up by `tokens_per_period` every period."""

    def __init__(
        self,
        token_limit: int,
        tokens_per_period: int,
        replenishment_seconds: float,
        queue_limit: int,
        clock: Clock = time.monotonic,
    ):
        super().__init__(queue_limit, clock)
        self.token_limit = token_limit
        self.tokens_per_period = tokens_per_period
        self.replenishment_seconds = replenishment_seconds
        self._tokens = token_limit
        self._last_refill = clock()

    @property
    def tokens(self) -> int:
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        elapsed = self._clock() - self._last_refill
        periods = math.floor(elapsed / self.replenishment_seconds)
        if periods > 0:
            self._tokens = min(
                self.token_limit, self._tokens + periods * self.tokens_per_period
            )
            self._last_refill += periods * self.replenishment_seconds

    def _try_take(self) -> bool:
        self._refill()
        if self._tokens > 0:
            self._tokens -= 1
            return True
        return False

    def _seconds_until_permit(self) -> float:
        self._refill()
        if self._tokens > 0:
            return 0.0
        return self._last_refill + self.replenishment_seconds - self._clock()


# ══════════════════════════════════════════════════════════════════════════
# Policies & Registry
# ══════════════════════════════════════════════════════════════════════════

class RateLimitPolicy:
    """
    A named rule: `partition` picks the key for a request, `factory` builds
    the limiter for a key the first time it is seen.
    """

    def __init__(
        self,
        name: str,
        partition: Callable[[Request], str],
        factory: Callable[[str], object],
    ):
        self.name = name
        self.partition = partition
        self.factory = factory
        self._limiters: Dict[str, object] = {}

    def limiter_for(self, request: Request):
        key = self.partition(request)
        limiter = self._limiters.get(key)
        if limiter is None:
            limiter = self.factory(key)
            self._limiters[key] = limiter
            logger.debug("Created %s limiter for partition %s/%s",
                         type(limiter).__name__, self.name, key)
        return limiter


class RateLimiterRegistry:
    """All rate-limit policies of one application instance."""

    def __init__(self, policies: Iterable[RateLimitPolicy]):
        self._policies = {policy.name: policy for policy in policies}

    def policy(self, name: str) -> RateLimitPolicy:
        try:
            return self._policies[name]
        except KeyError:
            raise KeyError(f"Unknown rate limit policy '{name}'") from None

    def limiter_for(self, name: str, request: Request):
        return self.policy(name).limiter_for(request)

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "RateLimiterRegistry":
        config = config or settings

        def modify_limiter(key: str):
            if key == "token":
                return TokenBucketLimiter(
                    token_limit=config.rate_limit_token_limit,
                    tokens_per_period=config.rate_limit_tokens_per_period,
                    replenishment_seconds=config.rate_limit_replenishment_seconds,
                    queue_limit=config.rate_limit_token_queue_limit,
                )
            return FixedWindowLimiter(
                permit_limit=config.rate_limit_modify_permit_limit,
                window_seconds=config.rate_limit_modify_window_seconds,
                queue_limit=config.rate_limit_modify_queue_limit,
            )

        return cls([
            RateLimitPolicy(
                "get",
                partition=lambda request: "get",
                factory=lambda key: ConcurrencyLimiter(
                    permit_limit=config.rate_limit_get_permit_limit,
                    queue_limit=config.rate_limit_get_queue_limit,
                ),
            ),
            RateLimitPolicy(
                "users",
                partition=lambda request: "users",
                factory=lambda key: NoLimiter(),
            ),
            RateLimitPolicy(
                "modify",
                partition=lambda request: "token" if request.headers.get("token") else "default",
                factory=modify_limiter,
            ),
        ])


# ══════════════════════════════════════════════════════════════════════════
# FastAPI Dependency
# ══════════════════════════════════════════════════════════════════════════

def rate_limit(policy: str) -> Callable[[Request], AsyncGenerator[None, None]]:
    """
    Builds a dependency that holds a permit of `policy` while the handler runs.

    Usage:
        @router.get("/time-entries", dependencies=[Depends(rate_limit("get"))])
    """

    async def dependency(request: Request) -> AsyncGenerator[None, None]:
        if not settings.rate_limit_enabled:
            yield
            return

        registry: RateLimiterRegistry = request.app.state.rate_limiters
        limiter = registry.limiter_for(policy, request)
        if not await limiter.acquire():
            logger.warning("Rate limit exceeded for policy %s on %s", policy, request.url.path)
            raise RateLimitExceededError(policy=policy, retry_after=limiter.retry_after)
        try:
            yield
        finally:
            limiter.release()

    return dependency
