"""In-memory engine client used by backend tests."""

from __future__ import annotations

from typing import Any


class NotFoundError(Exception):
    """Named like the client libraries' 404 exception."""

    status_code = 404


class FakeEngineClient:
    """In-memory stand-in for the async engine client.

    Accepts both calling conventions (``operations=``/keyword body fields
    and ``body=``), so it serves either backend.
    """

    def __init__(self) -> None:
        self.docs: dict[tuple[str, str], dict[str, Any]] = {}
        self.versions: dict[tuple[str, str], int] = {}
        self.closed = False

    async def bulk(
        self, operations: list[dict[str, Any]] | None = None, body: list[dict[str, Any]] | None = None
    ) -> dict[str, Any]:
        ops = operations if operations is not None else body or []
        items = []
        for action, doc in zip(ops[::2], ops[1::2], strict=True):
            meta = action["index"]
            key = (meta["_index"], meta["_id"])
            self.versions[key] = self.versions.get(key, 0) + 1
            self.docs[key] = dict(doc)
            items.append({"index": {"_index": key[0], "_id": key[1], "status": 201}})
        return {"took": 1, "errors": False, "items": items}

    async def get(self, index: str, id: str) -> dict[str, Any]:
        if (index, id) not in self.docs:
            raise NotFoundError(f"{index}/{id}")
        return {"_index": index, "_id": id, "found": True, "_source": dict(self.docs[(index, id)])}

    async def delete(self, index: str, id: str) -> dict[str, Any]:
        if (index, id) not in self.docs:
            raise NotFoundError(f"{index}/{id}")
        del self.docs[(index, id)]
        return {"_index": index, "_id": id, "result": "deleted"}

    async def search(self, index: str, body: dict[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
        request = body if body is not None else kwargs
        hits = [
            {
                "_index": doc_index,
                "_id": doc_id,
                "_version": self.versions[(doc_index, doc_id)],
                "_score": 1.0,
                "_source": dict(doc),
            }
            for (doc_index, doc_id), doc in self.docs.items()
            if doc_index == index
        ]
        start = request.get("from", 0)
        size = request.get("size", 10)
        return {
            "took": 1,
            "hits": {"total": {"value": len(hits), "relation": "eq"}, "hits": hits[start : start + size]},
        }

    async def close(self) -> None:
        self.closed = True

