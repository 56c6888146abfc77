# storefront/services/lock_service.py
from typing import Iterable, List

import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#compare-and-delete in one step: only the owner that set the lock may drop it
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Per-product mutual exclusion for checkout:
    - SET product:<id>:lock <owner> NX EX <ttl>
    - release through the Lua compare-and-delete above
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(product_id: int) -> str:
        return f"product:{product_id}:lock"

    @redis_retry()
    def acquire_product_lock(self, product_id: int, owner: str, ttl: int) -> bool:
        key = self._key(product_id)
        logger.info(f"Acquire lock {key} for {owner}")
        return bool(self.redis.set(name=key, value=owner, nx=True, ex=ttl))

    @redis_retry()
    def release_product_lock(self, product_id: int, owner: str) -> bool:
        key = self._key(product_id)
        logger.info(f"Release lock {key} for {owner}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, owner)
        return bool(res)

    def acquire_many(self, product_ids: Iterable[int], owner: str, ttl: int) -> int | None:
        """
        Lock products in ascending id order. On the first busy product every
        lock taken so far is released and that product id is returned.
        None means all locks are held.
        """
        taken: List[int] = []
        for product_id in sorted(set(product_ids)):
            if not self.acquire_product_lock(product_id, owner, ttl):
                logger.warning(f"Product {product_id} is locked by another checkout")
                self.release_many(taken, owner)
                return product_id
            taken.append(product_id)
        return None

    def release_many(self, product_ids: Iterable[int], owner: str) -> None:
        for product_id in product_ids:
            self.release_product_lock(product_id, owner)
