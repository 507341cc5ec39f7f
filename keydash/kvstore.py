import json
from abc import ABC, abstractmethod
from fnmatch import fnmatchcase
from threading import Lock
from typing import Optional, Union, List, Dict
from redis import Redis
from fastapi.encoders import jsonable_encoder
from structlog import get_logger
from keydash.settings import KeydashSettings, KeyValueStoreType
from keydash.exceptions import SettingsException

JsonableType = Union[dict, str, int, float]

logger = get_logger(__name__)


class KeyValueStore(ABC):
    def __init__(self, settings: KeydashSettings):
        self.settings = settings

    @abstractmethod
    def get_value(self, name: str) -> Optional[JsonableType]:
        pass

    @abstractmethod
    def set_value(self, name: str, value: JsonableType, ex: Optional[int] = None) -> JsonableType:
        pass

    @abstractmethod
    def delete_value(self, name: str):
        pass

    @abstractmethod
    def delete_values(self, pattern: str):
        pass

    @abstractmethod
    def list_keys(self, pattern: str) -> List[str]:
        pass

    @abstractmethod
    def incr_value(self, name: str, amount: int = 1) -> int:
        pass

    @abstractmethod
    def incr_hash_value(self, name: str, field: str, amount: int = 1) -> int:
        pass

    @abstractmethod
    def get_hash(self, name: str) -> Dict[str, int]:
        pass

    def get_or_set_default(self, name: str, default_value: JsonableType, ex: Optional[int] = None) -> JsonableType:
        value = self.get_value(name)
        if value:
            return value
        else:
            return self.set_value(name, default_value, ex)


class InMemKeyValueStore(KeyValueStore):
    def __init__(self, settings: KeydashSettings):
        super().__init__(settings)
        self._storage: dict = {}
        self._lock = Lock()

    def get_value(self, name: str) -> Optional[JsonableType]:
        return self._storage.get(name)

    def set_value(self, name: str, value: JsonableType, ex: Optional[int] = None) -> JsonableType:
        self._storage[name] = value
        return self._storage[name]

    def delete_value(self, name: str):
        self._storage.pop(name, None)

    def delete_values(self, pattern: str):
        keys_to_be_deleted = self.list_keys(pattern)
        for key in keys_to_be_deleted:
            self.delete_value(key)

    def list_keys(self, pattern: str) -> List[str]:
        return [k for k in list(self._storage) if fnmatchcase(k, pattern)]

    def incr_value(self, name: str, amount: int = 1) -> int:
        with self._lock:
            self._storage[name] = int(self._storage.get(name) or 0) + amount
            return self._storage[name]

    def incr_hash_value(self, name: str, field: str, amount: int = 1) -> int:
        with self._lock:
            hash_ = self._storage.setdefault(name, {})
            hash_[field] = hash_.get(field, 0) + amount
            return hash_[field]

    def get_hash(self, name: str) -> Dict[str, int]:
        with self._lock:
            return dict(self._storage.get(name) or {})


class RedisKeyValueStore(KeyValueStore):
    def __init__(self, settings: KeydashSettings):
        super().__init__(settings)
        redis_url = settings.connections.redis_url
        if redis_url:
            self.redis = Redis.from_url(redis_url)
            logger.info("Connected to redis", redis_url=redis_url)
        else:
            raise SettingsException("redis_url missing from settings.")

    def get_value(self, name: str) -> Optional[JsonableType]:
        encoded_value = self.redis.get(name)
        if encoded_value:
            return self._decode_value(encoded_value)
        return None

    def set_value(self, name: str, value: JsonableType, ex: Optional[int] = None) -> JsonableType:
        self.redis.set(name, self._encode_value(value), ex=ex)
        return value

    def delete_value(self, name: str):
        self.redis.delete(name)

    def delete_values(self, pattern: str):
        for key in self.redis.scan_iter(pattern):
            self.redis.delete(key)

    def list_keys(self, pattern: str) -> List[str]:
        return [key.decode() for key in self.redis.scan_iter(pattern)]

    def incr_value(self, name: str, amount: int = 1) -> int:
        return self.redis.incrby(name, amount)

    def incr_hash_value(self, name: str, field: str, amount: int = 1) -> int:
        return self.redis.hincrby(name, field, amount)

    def get_hash(self, name: str) -> Dict[str, int]:
        return {field.decode(): int(value) for field, value in self.redis.hgetall(name).items()}

    @staticmethod
    def _encode_value(value: JsonableType) -> str:
        return json.dumps(jsonable_encoder(value))

    @staticmethod
    def _decode_value(encoded_value: bytes) -> JsonableType:
        return json.loads(encoded_value)


def init_key_value_store(settings: KeydashSettings) -> KeyValueStore:
    if settings.kvstore == KeyValueStoreType.redis:
        return RedisKeyValueStore(settings)
    else:
        return InMemKeyValueStore(settings)
