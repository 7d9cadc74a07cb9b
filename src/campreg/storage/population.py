"""Reference population for documents that point at other documents."""

from collections.abc import Sequence
from typing import Any

from campreg.ports.storage import DocumentStorePort


def _project(document: dict[str, Any], projection: Sequence[str] | None) -> dict[str, Any]:
    if projection is None:
        return document
    return {field: document.get(field) for field in projection}


async def populate(
    store: DocumentStorePort,
    documents: list[dict[str, Any]],
    field: str,
    collection: str,
    projection: Sequence[str] | None = None,
) -> list[dict[str, Any]]:
    """Replace the id in ``field`` of each document with the referenced document.

    Each distinct reference is fetched once. Only ``projection`` fields of the
    referenced document are kept when given. A reference to a missing
    document populates as None.
    """
    ref_ids = {doc[field] for doc in documents if doc.get(field)}
    resolved: dict[str, dict[str, Any] | None] = {}
    for ref_id in ref_ids:
        target = await store.find_by_id(collection, ref_id)
        resolved[ref_id] = _project(target, projection) if target is not None else None

    return [{**doc, field: resolved.get(doc.get(field))} for doc in documents]
