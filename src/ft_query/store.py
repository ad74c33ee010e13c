"""Document store Protocols: the subset of PyMongo's async API the core uses.

pymongo.AsyncCollection satisfies these structurally; tests pass an
in-memory adapter with the same shape.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

Document = dict[str, Any]
Filter = Mapping[str, Any]


class FindCursor(Protocol):
    def sort(self, key_or_list: Any, direction: int | None = None) -> "FindCursor": ...

    def skip(self, skip: int) -> "FindCursor": ...

    def limit(self, limit: int) -> "FindCursor": ...

    async def to_list(self, length: int | None = None) -> list[Document]: ...


class CommandCursor(Protocol):
    async def to_list(self, length: int | None = None) -> list[Document]: ...


class DocumentCollection(Protocol):
    def find(
        self, filter: Filter | None = None, projection: Mapping[str, Any] | None = None
    ) -> FindCursor: ...

    async def find_one(
        self, filter: Filter, projection: Mapping[str, Any] | None = None
    ) -> Document | None: ...

    async def count_documents(self, filter: Filter) -> int: ...

    async def aggregate(self, pipeline: Sequence[Mapping[str, Any]]) -> CommandCursor: ...

    async def insert_one(self, document: Document) -> Any: ...

    async def insert_many(self, documents: Sequence[Document]) -> Any: ...

    async def find_one_and_update(
        self, filter: Filter, update: Mapping[str, Any], **kwargs: Any
    ) -> Document | None: ...

    async def find_one_and_delete(self, filter: Filter) -> Document | None: ...

    async def delete_many(self, filter: Filter) -> Any: ...


class DocumentDatabase(Protocol):
    def __getitem__(self, name: str) -> DocumentCollection: ...
