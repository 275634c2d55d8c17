"""Feature adapters: fetch feature rows for a query and check their shape."""

from __future__ import annotations

import abc
import enum
import functools
import threading
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from servingkit.errors import ErrorCode, ServingError, enforce
from servingkit.table import RecordBatch, Schema

A = TypeVar("A", bound="type[FeatureAdapter]")


class MockDataType(enum.Enum):
    """How mock features are generated."""

    INVALID_MOCK_DATA_TYPE = 0
    MDT_RANDOM = 1
    MDT_FIXED = 2


@dataclass
class MockOptions:
    """Options for the mock feature source."""

    type: MockDataType = MockDataType.INVALID_MOCK_DATA_TYPE


@dataclass
class FeatureSourceConfig:
    """Feature source settings; the kind of ``options`` selects the adapter."""

    options: object | None = None

    @property
    def options_kind(self) -> type | None:
        return None if self.options is None else type(self.options)


@dataclass
class FeatureParam:
    """The ids to fetch features for, plus an opaque query context."""

    query_datas: list[str] = field(default_factory=list)
    query_context: str = ""


@dataclass
class FetchRequest:
    """A request for features."""

    fs_param: FeatureParam
    header: dict[str, str] = field(default_factory=dict)


@dataclass
class FetchResponse:
    """Fetched features and response header data."""

    features: RecordBatch
    header: dict[str, str] = field(default_factory=dict)


class FeatureAdapter(abc.ABC):
    """Base of all feature sources."""

    def __init__(
        self,
        spec: FeatureSourceConfig,
        service_id: str,
        party_id: str,
        feature_schema: Schema,
    ) -> None:
        self.spec = spec
        self.service_id = service_id
        self.party_id = party_id
        self.feature_schema = feature_schema

    def fetch_feature(self, request: FetchRequest) -> FetchResponse:
        """Fetch features for ``request`` and validate the result."""
        response = self.on_fetch_feature(request)
        self.check_feature_valid(request, response.features)
        return response

    @abc.abstractmethod
    def on_fetch_feature(self, request: FetchRequest) -> FetchResponse:
        """Produce the features for ``request``."""

    def check_feature_valid(
        self, request: FetchRequest, features: RecordBatch | None
    ) -> None:
        """Check the fetched schema and row count against the request."""
        enforce(features is not None, ErrorCode.LOGIC_ERROR, "no features fetched")
        assert features is not None
        if self.feature_schema.num_fields > 0:
            enforce(
                features.schema == self.feature_schema,
                ErrorCode.NOT_FOUND,
                "result schema does not match the request expect.",
            )
        rows = len(request.fs_param.query_datas)
        enforce(
            rows == features.num_rows,
            ErrorCode.LOGIC_ERROR,
            f"query row_num {rows} should be equal to fetched row_num "
            f"{features.num_rows}",
        )


class FeatureAdapterFactory:
    """Maps kinds of feature source options to adapter classes."""

    def __init__(self) -> None:
        self._creators: dict[type, type[FeatureAdapter]] = {}
        self._lock = threading.Lock()

    def register(self, options_kind: type, adapter_cls: type[FeatureAdapter]) -> None:
        """Register ``adapter_cls`` for configs whose options are ``options_kind``."""
        with self._lock:
            if options_kind in self._creators:
                raise ServingError(
                    ErrorCode.UNEXPECTED_ERROR,
                    f"duplicated creator registered for {options_kind.__name__}",
                )
            self._creators[options_kind] = adapter_cls

    def create(
        self,
        spec: FeatureSourceConfig,
        service_id: str,
        party_id: str,
        feature_schema: Schema,
    ) -> FeatureAdapter:
        """Build the adapter registered for ``spec``'s options."""
        with self._lock:
            creator = self._creators.get(spec.options_kind)  # type: ignore[arg-type]
        if creator is None:
            raise ServingError(
                ErrorCode.UNEXPECTED_ERROR,
                f"no creator registered for operator type: {spec.options_kind}",
            )
        return creator(spec, service_id, party_id, feature_schema)


@functools.lru_cache(maxsize=None)
def default_factory() -> FeatureAdapterFactory:
    """The process-wide adapter factory."""
    return FeatureAdapterFactory()


def register_adapter(options_kind: type) -> Callable[[A], A]:
    """Class decorator registering an adapter with the default factory."""

    def decorate(cls: A) -> A:
        default_factory().register(options_kind, cls)
        return cls

    return decorate