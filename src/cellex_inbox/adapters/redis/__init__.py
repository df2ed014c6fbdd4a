"""Redis adapter – key-value storage with pub/sub change notification."""
from cellex_inbox.adapters.redis.storage import DEFAULT_CHANNEL, RedisChangeNotifier, RedisKeyValueStorage

__all__ = ["DEFAULT_CHANNEL", "RedisChangeNotifier", "RedisKeyValueStorage"]
