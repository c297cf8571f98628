"""Reconstruct nested connections from a Shopify bulk query JSONL export.

Shopify flattens a nested bulk query into one JSON object per line. Top-level
objects are written as-is; every object that came from a nested connection
carries a `__parentId` pointing at the object it was nested under:

    {"id":"gid://shopify/Product/1","title":"Shirt"}
    {"id":"gid://shopify/ProductVariant/9","sku":"S-1","__parentId":"gid://shopify/Product/1"}

Parsing is two-phase. The first pass streams the file once, decoding root
lines straight into the output list and buffering nested lines as edges in a
ConnectionSink keyed by (parent id, field name). The second pass walks the
output depth-first and grafts each buffered bucket onto its parent as a
connection, recursing into the attached nodes so any nesting depth is
rebuilt. Children whose parent never shows up are dropped.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, Iterable, Optional, Sequence, TypeVar, Union

import aiofiles
from pydantic import BaseModel, ValidationError

from .exceptions import (
    BulkDecodeError,
    BulkParseError,
    ConnectionFieldMismatchError,
    MissingIdentifierError,
    NestingDepthExceededError,
)
from .type_registry import DEFAULT_TYPE_REGISTRY, TypeRegistry


logger = logging.getLogger(__name__)

PARENT_ID_FIELD = "__parentId"

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class RootRecord:
    """A top-level object, destined for the output list."""

    line_no: int
    item: BaseModel


@dataclass(frozen=True)
class ChildRecord:
    """A nested object wrapped in its edge, waiting for its parent."""

    line_no: int
    parent_id: str
    field_name: str
    connection_type: type[BaseModel]
    edge: BaseModel


StreamRecord = Union[RootRecord, ChildRecord]


class _Bucket:
    __slots__ = ("connection_type", "edges")

    def __init__(self, connection_type: type[BaseModel]):
        self.connection_type = connection_type
        self.edges: list[BaseModel] = []


class ConnectionSink:
    """Buffered child edges: parent id -> field name -> ordered edges."""

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, _Bucket]] = {}
        self.edge_count = 0

    def add(self, record: ChildRecord) -> None:
        fields = self._buckets.setdefault(record.parent_id, {})
        bucket = fields.get(record.field_name)
        if bucket is None:
            bucket = fields[record.field_name] = _Bucket(record.connection_type)
        elif bucket.connection_type is not record.connection_type:
            raise BulkParseError(
                f"Line {record.line_no}: connection '{record.field_name}' of "
                f"{record.parent_id} mixes {bucket.connection_type.__name__} and "
                f"{record.connection_type.__name__}"
            )
        bucket.edges.append(record.edge)
        self.edge_count += 1

    def get(self, parent_id: str) -> Optional[dict[str, _Bucket]]:
        return self._buckets.get(parent_id)

    def parent_ids(self) -> set[str]:
        return set(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)


def _node_of(item: Any) -> Any:
    """Unwrap an edge-like item to the node it wraps."""
    node = getattr(item, "node", None)
    if isinstance(node, BaseModel):
        return node
    return item


class BulkResultParser(Generic[ModelT]):
    """Decodes a bulk JSONL export into a list of `model` with nested connections."""

    DEFAULT_MAX_DEPTH = 10

    def __init__(
        self,
        model: type[ModelT],
        registry: TypeRegistry = DEFAULT_TYPE_REGISTRY,
        max_depth: int = DEFAULT_MAX_DEPTH,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.model = model
        self.registry = registry
        self.max_depth = max_depth
        self.logger = logger_instance or logger

    def classify_line(self, raw: Union[str, bytes], line_no: int) -> Optional[StreamRecord]:
        """Decode one JSONL line into a RootRecord or ChildRecord (None if blank)."""
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise BulkDecodeError(line_no, exc) from exc
        raw = raw.strip()
        if not raw:
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise BulkDecodeError(line_no, exc) from exc
        if not isinstance(data, dict):
            raise BulkDecodeError(line_no, f"expected a JSON object, got {type(data).__name__}")

        if PARENT_ID_FIELD not in data:
            return RootRecord(line_no=line_no, item=self._validate(self.model, data, line_no))

        parent_id = data.pop(PARENT_ID_FIELD)
        if not isinstance(parent_id, str) or not parent_id:
            raise BulkDecodeError(
                line_no, f"`{PARENT_ID_FIELD}` must be a non-empty string, got {parent_id!r}"
            )

        gid = data.get("id")
        if gid is None:
            raise MissingIdentifierError(
                f"Line {line_no}: the connection type must query the `id` field "
                f"(parent={parent_id})"
            )
        entry = self.registry.resolve(gid)
        node = self._validate(entry.node_type, data, line_no)
        edge = entry.edge_type(node=node)
        return ChildRecord(
            line_no=line_no,
            parent_id=parent_id,
            field_name=entry.field_name,
            connection_type=entry.connection_type,
            edge=edge,
        )

    def parse_lines(self, lines: Iterable[Union[str, bytes]]) -> list[ModelT]:
        """Parse an iterable of JSONL lines. Raises on the first bad line."""
        items: list[ModelT] = []
        sink = ConnectionSink()
        for line_no, raw in enumerate(lines, start=1):
            self._ingest(self.classify_line(raw, line_no), items, sink)
        return self._finish(items, sink)

    async def parse_file(self, path: Union[str, Path]) -> list[ModelT]:
        """Stream a downloaded JSONL file line by line.

        Lines are read as bytes and decoded one at a time, so bad UTF-8
        is reported with its line number.
        """
        items: list[ModelT] = []
        sink = ConnectionSink()
        line_no = 0
        async with aiofiles.open(path, mode="rb") as f:
            async for raw in f:
                line_no += 1
                self._ingest(self.classify_line(raw, line_no), items, sink)
        return self._finish(items, sink)

    def attach_connections(
        self,
        items: Sequence[Any],
        sink: ConnectionSink,
        depth: int = 0,
    ) -> set[str]:
        """Graft buffered edges onto `items` and their descendants.

        Returns the parent ids whose buckets were attached.
        """
        if depth > self.max_depth:
            raise NestingDepthExceededError(
                f"Nested connections deeper than {self.max_depth} levels"
            )

        attached: set[str] = set()
        for item in items:
            node = _node_of(item)
            parent_id = getattr(node, "id", None)
            if not isinstance(parent_id, str) or not parent_id:
                raise MissingIdentifierError(
                    f"No string `id` field on {type(node).__name__} at depth {depth}"
                )

            buckets = sink.get(parent_id)
            if not buckets:
                continue

            for field_name, bucket in buckets.items():
                if field_name not in type(node).model_fields:
                    raise ConnectionFieldMismatchError(field_name, type(node).__name__)
                setattr(node, field_name, bucket.connection_type(edges=bucket.edges))
                attached.add(parent_id)
                attached |= self.attach_connections(bucket.edges, sink, depth + 1)

        return attached

    def _ingest(
        self,
        record: Optional[StreamRecord],
        items: list[ModelT],
        sink: ConnectionSink,
    ) -> None:
        if record is None:
            return
        if isinstance(record, RootRecord):
            items.append(record.item)
        else:
            sink.add(record)

    def _finish(self, items: list[ModelT], sink: ConnectionSink) -> list[ModelT]:
        if len(sink):
            attached = self.attach_connections(items, sink)
            orphans = sink.parent_ids() - attached
            if orphans:
                self.logger.debug(
                    "Dropped nested records for %s unknown parents", len(orphans)
                )
        self.logger.info(
            "Parsed bulk result: roots=%s, nested=%s", len(items), sink.edge_count
        )
        return items

    @staticmethod
    def _validate(model: type[ModelT], data: dict, line_no: int) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise BulkDecodeError(line_no, exc) from exc
