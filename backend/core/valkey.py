"""
Valkey connection utilities.

Valkey (Redis-compatible) mirrors build progress snapshots so that status
and stream endpoints can be served from any API worker. The controllers
themselves live in-process; this is a read model, not the source of truth.
"""
from __future__ import annotations

import json
import logging
import os
from collections import deque
from typing import Any, Dict, List, Optional

import redis
from redis import Redis
from redis.connection import ConnectionPool

logger = logging.getLogger(__name__)

BUILD_TTL_SECONDS = 60 * 60
FAKE_CHANNEL_BACKLOG = 256


def _build_pool() -> ConnectionPool:
    url = os.getenv("VALKEY_URL")
    if url:
        logger.info("connecting to Valkey via URL %s...", url[:20])
        return ConnectionPool.from_url(url, max_connections=20, socket_keepalive=True)

    host = os.getenv("VALKEY_HOST", "localhost")
    port = int(os.getenv("VALKEY_PORT", "6379"))
    logger.info("connecting to Valkey via host %s:%s", host, port)
    return ConnectionPool(host=host, port=port, max_connections=20, socket_keepalive=True)


_valkey_client: Redis | FakeValkey | None = None


def get_client() -> Redis | FakeValkey:
    """Return the shared Valkey client, falling back to memory when no server answers."""
    global _valkey_client
    if _valkey_client is not None:
        return _valkey_client

    if os.getenv("VALKEY_URL") or os.getenv("VALKEY_HOST"):
        client = redis.Redis(connection_pool=_build_pool())
        try:
            client.ping()
            _valkey_client = client
            return client
        except redis.RedisError as exc:
            if os.getenv("RENDER_SERVICE_ID"):
                raise RuntimeError(f"Valkey connection required in production: {exc}") from exc
            logger.warning("Valkey connection failed (%s); using in-memory build status", exc)

    _valkey_client = FakeValkey()
    return _valkey_client


def use_client(client: Redis | FakeValkey | None) -> None:
    """Swap the shared client (tests, embedded runs)."""
    global _valkey_client
    _valkey_client = client


class FakeValkey:
    """
    In-memory stand-in for the handful of Redis operations used here.
    """

    def __init__(self) -> None:
        self.store: Dict[str, Dict[str, str]] = {}
        self._subscribers: Dict[str, List[deque]] = {}

    def hset(self, name: str, mapping: Optional[Dict[str, object]] = None, **kwargs) -> None:
        data = self.store.setdefault(name, {})
        for k, v in {**(mapping or {}), **kwargs}.items():
            data[k] = str(v)

    def hgetall(self, name: str) -> Dict[str, str]:
        return self.store.get(name, {}).copy()

    def expire(self, name: str, seconds: int) -> bool:
        return name in self.store

    def publish(self, channel: str, message: str) -> int:
        queues = self._subscribers.get(channel, [])
        for queue in queues:
            queue.append(message)
        return len(queues)

    class _FakePubSub:
        # Each subscriber only sees messages published after it subscribed.
        def __init__(self, subscribers: Dict[str, List[deque]]):
            self.subscribers = subscribers
            self._queues: Dict[str, deque] = {}

        def subscribe(self, channel: str) -> None:
            if channel not in self._queues:
                queue: deque = deque(maxlen=FAKE_CHANNEL_BACKLOG)
                self._queues[channel] = queue
                self.subscribers.setdefault(channel, []).append(queue)

        def get_message(self, timeout: float | None = None):
            for queue in self._queues.values():
                if queue:
                    return {"type": "message", "data": queue.popleft()}
            return None

        def close(self) -> None:
            for channel, queue in self._queues.items():
                listeners = self.subscribers.get(channel, [])
                listeners[:] = [q for q in listeners if q is not queue]
            self._queues.clear()

    def pubsub(self):
        return self._FakePubSub(self._subscribers)

    def ping(self) -> bool:
        return True


def _decode(value: Any) -> Any:
    return value.decode() if isinstance(value, (bytes, bytearray)) else value


def build_key(agent_id: str) -> str:
    return f"builds:{agent_id}"


def build_channel(agent_id: str) -> str:
    return f"builds:{agent_id}:events"


def set_build_status(agent_id: str, snapshot: Dict[str, Any]) -> None:
    """Store the latest snapshot and publish it to stream subscribers."""
    client = get_client()
    mapping = {k: json.dumps(v) for k, v in snapshot.items()}
    client.hset(build_key(agent_id), mapping=mapping)
    client.expire(build_key(agent_id), BUILD_TTL_SECONDS)
    try:
        client.publish(build_channel(agent_id), json.dumps(snapshot))
    except redis.RedisError as exc:
        logger.warning("build status publish failed: %s", exc, extra={"agent_id": agent_id})


def get_build_status(agent_id: str) -> Optional[Dict[str, Any]]:
    data = get_client().hgetall(build_key(agent_id))
    if not data:
        return None
    return {_decode(k): json.loads(_decode(v)) for k, v in data.items()}
