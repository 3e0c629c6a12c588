from __future__ import annotations

import threading
from typing import Generic, Hashable, Iterator, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ShardedDict(Generic[K, V]):
    """Key-partitioned dict: each shard has its own lock.

    Writers touching different shards never contend. Reads of the whole map
    (``values``/``items``) lock one shard at a time and return a snapshot, so
    concurrent writers are never blocked for the full iteration.
    """

    def __init__(self, shards: int = 16):
        if shards < 1:
            raise ValueError("shards must be >= 1")
        self._shards: list[dict[K, V]] = [{} for _ in range(shards)]
        self._locks = [threading.Lock() for _ in range(shards)]

    def _index(self, key: K) -> int:
        return hash(key) % len(self._shards)

    def get(self, key: K) -> Optional[V]:
        i = self._index(key)
        with self._locks[i]:
            return self._shards[i].get(key)

    def put(self, key: K, value: V) -> None:
        i = self._index(key)
        with self._locks[i]:
            self._shards[i][key] = value

    def items(self) -> list[tuple[K, V]]:
        out: list[tuple[K, V]] = []
        for shard, lock in zip(self._shards, self._locks):
            with lock:
                out.extend(shard.items())
        return out

    def values(self) -> list[V]:
        return [v for _, v in self.items()]

    def clear(self) -> None:
        for shard, lock in zip(self._shards, self._locks):
            with lock:
                shard.clear()

    def __contains__(self, key: object) -> bool:
        i = hash(key) % len(self._shards)
        with self._locks[i]:
            return key in self._shards[i]

    def __len__(self) -> int:
        total = 0
        for shard, lock in zip(self._shards, self._locks):
            with lock:
                total += len(shard)
        return total

    def __iter__(self) -> Iterator[K]:
        return iter([k for k, _ in self.items()])
