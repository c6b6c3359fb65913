"""읽음 상태 캐시 — Redis 기반 사용자별 읽음 집합 캐시.

Read-state cache — ReadSets stored in Redis under one key per user, shared
by every worker process. Entries expire through SETEX. Writers drop the
user's key only after their transaction commits, so the next load always
sees the committed read rows.

With no REDIS_URL (or a TTL of 0) caching is disabled and every load goes
to the database. Redis errors are logged and treated as a cache miss; the
database stays the source of truth.
"""

import json
import logging
from datetime import datetime
from typing import Any, AsyncIterator, Awaitable, Callable, Protocol
from uuid import UUID

from redis.asyncio import Redis
from redis.exceptions import RedisError

from shiftboard.config import settings
from shiftboard.utils.notification_keys import NotificationKey, NotificationType, ReadSet

logger = logging.getLogger(__name__)

ReadSetLoader = Callable[[], Awaitable[ReadSet]]

# 캐시 키 접두사 — Key namespace for every cached read set
KEY_PREFIX: str = "shiftboard:read-state"


class SupportsReadStateClient(Protocol):
    """캐시가 사용하는 Redis 명령 (The Redis commands the cache relies on)."""

    async def get(self, name: str) -> Any: ...

    async def setex(self, name: str, time: int, value: str) -> Any: ...

    async def delete(self, *names: str) -> int: ...

    def scan_iter(self, match: str | None = None) -> AsyncIterator[Any]: ...


def dump_read_set(read_set: ReadSet) -> str:
    """ReadSet을 JSON 문자열로 직렬화합니다."""
    entries: list[list[str | None]] = [
        [key.type.value, str(key.id), at.isoformat() if at is not None else None]
        for key, at in read_set.read_at.items()
    ]
    return json.dumps({"user_id": str(read_set.user_id), "entries": entries})


def load_read_set(raw: str | bytes) -> ReadSet:
    """JSON 문자열에서 ReadSet을 복원합니다.

    Raises:
        ValueError: 형식이 잘못된 경우 (Malformed payload)
    """
    data: dict[str, Any] = json.loads(raw)
    read_at: dict[NotificationKey, datetime | None] = {}
    try:
        for type_value, notification_id, at in data["entries"]:
            key = NotificationKey(NotificationType(type_value), UUID(notification_id))
            read_at[key] = datetime.fromisoformat(at) if at is not None else None
        return ReadSet(user_id=UUID(data["user_id"]), read_at=read_at)
    except (KeyError, TypeError) as exc:
        raise ValueError("Malformed read-state payload") from exc


class ReadStateCache:
    """사용자별 ReadSet 캐시.

    Attributes:
        client: Redis 클라이언트, None이면 캐시 비활성화 (Redis client; None disables caching)
        ttl_seconds: 항목 유지 시간, 0 이하이면 캐시 비활성화 (Entry TTL, <= 0 disables caching)
    """

    def __init__(self, client: SupportsReadStateClient | None, ttl_seconds: int) -> None:
        self.client: SupportsReadStateClient | None = client
        self.ttl_seconds: int = ttl_seconds

    @property
    def enabled(self) -> bool:
        return self.client is not None and self.ttl_seconds > 0

    def _key(self, user_id: UUID) -> str:
        return f"{KEY_PREFIX}:{user_id}"

    async def get(self, user_id: UUID) -> ReadSet | None:
        if not self.enabled:
            return None
        try:
            raw = await self.client.get(self._key(user_id))
        except RedisError as exc:
            logger.warning("Read-state cache get failed for user %s: %s", user_id, exc)
            return None
        if raw is None:
            return None
        try:
            return load_read_set(raw)
        except ValueError:
            logger.warning("Discarding unreadable read-state entry for user %s", user_id)
            return None

    async def put(self, read_set: ReadSet) -> None:
        if not self.enabled:
            return
        try:
            await self.client.setex(self._key(read_set.user_id), self.ttl_seconds, dump_read_set(read_set))
        except RedisError as exc:
            logger.warning("Read-state cache set failed for user %s: %s", read_set.user_id, exc)

    async def get_or_load(self, user_id: UUID, loader: ReadSetLoader) -> ReadSet:
        """캐시에 있으면 반환하고, 없으면 loader로 조회 후 저장합니다.

        A failed load raises and caches nothing.
        """
        cached = await self.get(user_id)
        if cached is not None:
            return cached
        read_set = await loader()
        await self.put(read_set)
        return read_set

    async def invalidate(self, user_id: UUID) -> None:
        """사용자의 캐시 항목을 삭제합니다 (커밋 이후 호출)."""
        if self.client is None:
            return
        try:
            await self.client.delete(self._key(user_id))
        except RedisError as exc:
            # 삭제 실패 시 TTL 만료까지 이전 집합이 남음
            logger.error("Read-state cache invalidation failed for user %s: %s", user_id, exc)

    async def clear(self) -> None:
        """모든 사용자의 캐시 항목을 삭제합니다 (SCAN + DEL by prefix)."""
        if self.client is None:
            return
        try:
            keys: list[Any] = [key async for key in self.client.scan_iter(match=f"{KEY_PREFIX}:*")]
            if keys:
                await self.client.delete(*keys)
        except RedisError as exc:
            logger.error("Read-state cache clear failed: %s", exc)

    async def aclose(self) -> None:
        """Redis 연결 풀을 닫습니다 (Close the connection pool on shutdown)."""
        if isinstance(self.client, Redis):
            await self.client.aclose()


def _build_client() -> Redis | None:
    if not settings.REDIS_URL:
        return None
    return Redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
    )


# 싱글턴 인스턴스 — Singleton instance
read_state_cache: ReadStateCache = ReadStateCache(_build_client(), settings.READ_STATE_CACHE_TTL_SECONDS)
