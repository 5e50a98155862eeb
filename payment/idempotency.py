import redis
from typing import Optional
from django.conf import settings


class IdempotencyStore:
    """Redis-backed map from a client Idempotency-Key to the transaction it produced"""

    prefix = "payment_idempotency"

    def __init__(self, client=None, ttl_seconds: Optional[int] = None):
        self.redis_client = client or redis.Redis(
            host=settings.REDIS_HOST,
            port=int(settings.REDIS_PORT),
            db=int(settings.REDIS_DB),
            decode_responses=True
        )
        self.ttl_seconds = ttl_seconds or getattr(settings, 'POS_IDEMPOTENCY_TTL', 900)

    def _key(self, scope: str, idempotency_key: str) -> str:
        return f"{self.prefix}:{scope}:{idempotency_key}"

    def remember(self, scope: str, idempotency_key: str, transaction_id: int) -> bool:
        """
        Store the transaction produced for a key

        Args:
            scope: What was paid, e.g. "table:3" or "order:12"
            idempotency_key: Key sent by the till in the Idempotency-Key header
            transaction_id: Transaction created for the request

        Returns:
            True if stored successfully
        """
        return bool(self.redis_client.setex(self._key(scope, idempotency_key), self.ttl_seconds, transaction_id))

    def lookup(self, scope: str, idempotency_key: str) -> Optional[int]:
        """
        Get the transaction id already recorded for a key

        Returns:
            Transaction id if found, None if not found or expired
        """
        value = self.redis_client.get(self._key(scope, idempotency_key))
        return int(value) if value is not None else None


def get_idempotency_store() -> IdempotencyStore:
    return IdempotencyStore()
