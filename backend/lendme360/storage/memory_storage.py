from fnmatch import fnmatchcase
from typing import Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class InMemoryStorageService:
    """
    A key-value store for Pydantic models, held in process memory.

    Models are kept as JSON strings, so every read returns a fresh copy and
    callers can only change stored state through `set_model`.
    """

    def __init__(self):
        self._data: Dict[str, str] = {}

    async def set_model(self, key: str, model: BaseModel):
        """
        Stores a Pydantic model instance as a JSON string.
        :param key: The storage key.
        :param model: The Pydantic model instance to store.
        """
        self._data[key] = model.model_dump_json(by_alias=True)

    async def get_model(self, key: str, model_class: Type[T]) -> Optional[T]:
        """
        Gets a Pydantic model instance by key.
        :param key: The storage key.
        :param model_class: The Pydantic model class to instantiate.
        :return: The model instance or None if not found.
        """
        data = self._data.get(key)
        if data:
            return model_class.model_validate_json(data)
        return None

    async def get_models(self, pattern: str, model_class: Type[T]) -> List[T]:
        """Returns every model whose key matches a glob pattern, in insertion order."""
        return [
            model_class.model_validate_json(self._data[key])
            for key in await self.get_keys_by_pattern(pattern)
        ]

    async def delete_key(self, key: str) -> int:
        """Deletes a key. Returns the number of removed keys."""
        return 1 if self._data.pop(key, None) is not None else 0

    async def get_keys_by_pattern(self, pattern: str) -> List[str]:
        """Returns a list of keys matching a pattern."""
        return [key for key in self._data if fnmatchcase(key, pattern)]
