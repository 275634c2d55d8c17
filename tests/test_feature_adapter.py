import pytest

from servingkit.errors import ErrorCode, ServingError
from servingkit.feature_adapter import (
    FeatureAdapter,
    FeatureAdapterFactory,
    FeatureParam,
    FeatureSourceConfig,
    FetchRequest,
    FetchResponse,
    MockOptions,
    default_factory,
    register_adapter,
)
from servingkit.table import DataType, Field, RecordBatch, Schema

SCHEMA = Schema([Field("x1", DataType.INT32), Field("x2", DataType.STRING)])


class _StubOptions:
    pass


class _EchoAdapter(FeatureAdapter):
    """Returns one row per query id with the configured schema."""

    def on_fetch_feature(self, request):
        ids = request.fs_param.query_datas
        batch = RecordBatch(self.feature_schema, [[int(i) for i in ids], list(ids)])
        return FetchResponse(features=batch, header=dict(request.header))


class _ShortAdapter(FeatureAdapter):
    def on_fetch_feature(self, request):
        return FetchResponse(features=RecordBatch(self.feature_schema, [[1], ["1"]]))


class _WrongSchemaAdapter(FeatureAdapter):
    def on_fetch_feature(self, request):
        schema = Schema([Field("other", DataType.BOOL)])
        rows = len(request.fs_param.query_datas)
        return FetchResponse(features=RecordBatch(schema, [[True] * rows]))


def _request(*ids):
    return FetchRequest(fs_param=FeatureParam(query_datas=list(ids)), header={"k": "v"})


@pytest.fixture
def factory():
    f = FeatureAdapterFactory()
    f.register(_StubOptions, _EchoAdapter)
    return f


def test_create_passes_arguments(factory):
    spec = FeatureSourceConfig(options=_StubOptions())
    adapter = factory.create(spec, "test_service_id", "alice", SCHEMA)
    assert isinstance(adapter, _EchoAdapter)
    assert adapter.service_id == "test_service_id"
    assert adapter.party_id == "alice"
    assert adapter.feature_schema == SCHEMA
    assert adapter.spec is spec


def test_fetch_feature(factory):
    adapter = factory.create(FeatureSourceConfig(_StubOptions()), "s", "p", SCHEMA)
    response = adapter.fetch_feature(_request("0", "1", "3"))
    assert response.features.num_rows == 3
    assert response.features.column_by_name("x2") == ["0", "1", "3"]
    assert response.header == {"k": "v"}


def test_duplicate_registration(factory):
    with pytest.raises(ServingError) as info:
        factory.register(_StubOptions, _ShortAdapter)
    assert info.value.code is ErrorCode.UNEXPECTED_ERROR


def test_unknown_options(factory):
    with pytest.raises(ServingError):
        factory.create(FeatureSourceConfig(options=MockOptions()), "s", "p", SCHEMA)
    with pytest.raises(ServingError):
        factory.create(FeatureSourceConfig(), "s", "p", SCHEMA)


def test_row_count_mismatch():
    adapter = _ShortAdapter(FeatureSourceConfig(), "s", "p", SCHEMA)
    with pytest.raises(ServingError) as info:
        adapter.fetch_feature(_request("a", "b"))
    assert info.value.code is ErrorCode.LOGIC_ERROR


def test_schema_mismatch():
    adapter = _WrongSchemaAdapter(FeatureSourceConfig(), "s", "p", SCHEMA)
    with pytest.raises(ServingError) as info:
        adapter.fetch_feature(_request("a"))
    assert info.value.code is ErrorCode.NOT_FOUND


def test_empty_schema_skips_schema_check():
    adapter = _WrongSchemaAdapter(FeatureSourceConfig(), "s", "p", Schema())
    response = adapter.fetch_feature(_request("a", "b"))
    assert response.features.num_rows == 2


def test_options_kind():
    assert FeatureSourceConfig(options=MockOptions()).options_kind is MockOptions
    assert FeatureSourceConfig().options_kind is None


def test_default_factory_is_shared_and_decorator_registers():
    assert default_factory() is default_factory()

    class _DecoratedOptions:
        pass

    @register_adapter(_DecoratedOptions)
    class _Decorated(_EchoAdapter):
        pass

    adapter = default_factory().create(
        FeatureSourceConfig(_DecoratedOptions()), "s", "p", SCHEMA
    )
    assert isinstance(adapter, _Decorated)
    with pytest.raises(ServingError):
        register_adapter(_DecoratedOptions)(_EchoAdapter)