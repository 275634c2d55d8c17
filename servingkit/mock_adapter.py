"""A feature adapter that makes up feature values, for tests and demos."""

from __future__ import annotations

import random
from typing import Any, Callable

from servingkit.errors import ErrorCode, ServingError, enforce
from servingkit.feature_adapter import (
    FeatureAdapter,
    FeatureSourceConfig,
    FetchRequest,
    FetchResponse,
    MockDataType,
    MockOptions,
    register_adapter,
)
from servingkit.table import DataType, Field, RecordBatch, Schema

# Every fetch starts the generator from the same seed, so random mock data
# is repeatable from one call to the next.
_SEED = 5489

_Generator = tuple[Any, Callable[[int], Any]]


def _int_value(r: int) -> int:
    return r % 100


def _float_value(r: int) -> float:
    return (r % 100) / 50


_GENERATORS: dict[DataType, _Generator] = {
    DataType.BOOL: (True, lambda r: bool(r % 2)),
    DataType.INT8: (1, _int_value),
    DataType.UINT8: (1, _int_value),
    DataType.INT16: (1, _int_value),
    DataType.UINT16: (1, _int_value),
    DataType.INT32: (1, _int_value),
    DataType.UINT32: (1, _int_value),
    DataType.INT64: (1, _int_value),
    DataType.UINT64: (1, _int_value),
    DataType.FLOAT: (1.0, _float_value),
    DataType.DOUBLE: (1.0, _float_value),
    DataType.STRING: ("1", lambda r: str(r % 100)),
    DataType.BINARY: (b"1", lambda r: str(r % 100).encode("ascii")),
}

_NO_FEATURE_SCHEMA = Schema([Field("mock", DataType.INT32)])


@register_adapter(MockOptions)
class MockAdapter(FeatureAdapter):
    """Produces fixed or pseudo-random values for every requested feature."""

    def __init__(
        self,
        spec: FeatureSourceConfig,
        service_id: str,
        party_id: str,
        feature_schema: Schema,
    ) -> None:
        super().__init__(spec, service_id, party_id, feature_schema)
        enforce(
            isinstance(spec.options, MockOptions),
            ErrorCode.INVALID_ARGUMENT,
            "invalid mock options",
        )
        requested = spec.options.type  # type: ignore[union-attr]
        self.mock_type = (
            requested
            if requested is not MockDataType.INVALID_MOCK_DATA_TYPE
            else MockDataType.MDT_FIXED
        )

    def on_fetch_feature(self, request: FetchRequest) -> FetchResponse:
        """Generate one row of features per queried id."""
        rows = len(request.fs_param.query_datas)
        enforce(
            rows > 0,
            ErrorCode.INVALID_ARGUMENT,
            "get empty feature service query datas.",
        )
        if self.feature_schema.num_fields == 0:
            # No feature needed: answer with a single placeholder column.
            batch = RecordBatch(_NO_FEATURE_SCHEMA, [[1] * rows], rows)
            return FetchResponse(features=batch)

        rng = random.Random(_SEED)
        columns = [self._column(f, rows, rng) for f in self.feature_schema]
        return FetchResponse(features=RecordBatch(self.feature_schema, columns, rows))

    def _column(self, field: Field, rows: int, rng: random.Random) -> list[Any]:
        generator = _GENERATORS.get(field.type)
        if generator is None:
            raise ServingError(
                ErrorCode.UNEXPECTED_ERROR, f"unkown field type {field.type}"
            )
        fixed, make = generator
        if self.mock_type is MockDataType.MDT_FIXED:
            return [fixed] * rows
        return [make(rng.getrandbits(32)) for _ in range(rows)]