"""A small columnar table: typed fields, schemas and record batches."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Sequence

from servingkit.errors import ErrorCode, ServingError, enforce, enforce_eq, enforce_ge


class DataType(enum.Enum):
    """Column value types."""

    BOOL = "bool"
    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    BINARY = "binary"


@dataclass(frozen=True)
class Field:
    """A named, typed column."""

    name: str
    type: DataType


class Schema:
    """An ordered collection of fields."""

    def __init__(self, fields: Iterable[Field] = ()) -> None:
        self.fields: tuple[Field, ...] = tuple(fields)

    @property
    def num_fields(self) -> int:
        return len(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __getitem__(self, index: int) -> Field:
        return self.fields[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self.fields == other.fields

    def __hash__(self) -> int:
        return hash(self.fields)

    def __repr__(self) -> str:
        inner = ", ".join(f"{f.name}: {f.type.value}" for f in self.fields)
        return f"Schema({inner})"

    def field_index(self, name: str) -> int:
        """Index of the first field called ``name``, or -1 if there is none."""
        return next((i for i, f in enumerate(self.fields) if f.name == name), -1)

    def names(self) -> list[str]:
        """Field names in order."""
        return [f.name for f in self.fields]


class RecordBatch:
    """Equal-length columns described by a schema."""

    def __init__(
        self,
        schema: Schema,
        columns: Sequence[Sequence[Any]],
        num_rows: int | None = None,
    ) -> None:
        columns = [list(c) for c in columns]
        enforce_eq(
            len(columns), len(schema), "column count should match schema"
        )
        if num_rows is None:
            num_rows = len(columns[0]) if columns else 0
        for field, column in zip(schema, columns):
            enforce(
                len(column) == num_rows,
                ErrorCode.LOGIC_ERROR,
                f"column {field.name} has {len(column)} rows, expected {num_rows}",
            )
        self.schema = schema
        self.columns = columns
        self.num_rows = num_rows

    @property
    def num_columns(self) -> int:
        return len(self.columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordBatch):
            return NotImplemented
        return (
            self.schema == other.schema
            and self.num_rows == other.num_rows
            and self.columns == other.columns
        )

    def __repr__(self) -> str:
        return f"RecordBatch({self.schema!r}, rows={self.num_rows})"

    def column(self, index: int) -> list[Any]:
        """The column at ``index``."""
        return self.columns[index]

    def column_by_name(self, name: str) -> list[Any]:
        """The column whose field is called ``name``."""
        index = self.schema.field_index(name)
        if index < 0:
            raise ServingError(ErrorCode.NOT_FOUND, f"no column named {name}")
        return self.columns[index]

    def select(self, schema: Schema) -> RecordBatch:
        """Return a batch with the columns named by ``schema``, in its order."""
        picked = []
        for field in schema:
            index = self.schema.field_index(field.name)
            enforce_ge(index, 0, f"missing column {field.name}")
            picked.append(self.columns[index])
        return RecordBatch(schema, picked, self.num_rows)