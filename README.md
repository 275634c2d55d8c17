# servingkit

Building blocks for a model-serving runtime, in plain Python with no
third-party dependencies.

## Modules

- `servingkit.errors`: the `ErrorCode` enumeration, the `ServingError`
  exception (with `code`, `message` and `detail`), and checks that raise
  `ServingError` when they fail: `enforce(condition, code, message)`,
  `enforce_eq`, `enforce_ne`, `enforce_lt`, `enforce_le`, `enforce_gt`,
  `enforce_ge` (these raise with `ErrorCode.LOGIC_ERROR`) and
  `check_not_null`.
- `servingkit.link_func`: `LinkFunctionType`, `AlgorithmType`,
  `parse_link_func_type(name)` and `apply_link_func(x, lf_type)`. The link
  functions cover `exp`, reciprocal, identity, the exact sigmoid and a set of
  sigmoid approximations (minimax, Taylor, least-squares, segmented and
  others).
- `servingkit.table`: a small columnar model. `DataType`, `Field`,
  `Schema` (`field_index`, `names`) and `RecordBatch` (`column`,
  `column_by_name`, `select`).
- `servingkit.feature_adapter`: the `FeatureAdapter` base class, the
  `FeatureSourceConfig`, `FeatureParam`, `FetchRequest` and `FetchResponse`
  types, `MockOptions` and `MockDataType`, and `FeatureAdapterFactory`,
  which picks an adapter class by the type of `FeatureSourceConfig.options`.
  `default_factory()` returns the process-wide factory and
  `register_adapter(options_kind)` is a class decorator that registers with
  it. `fetch_feature` checks that the fetched schema matches the expected
  one and that there is one row per queried id.
- `servingkit.mock_adapter`: `MockAdapter`, registered for `MockOptions`.
  It fills every requested column with a fixed value (`MDT_FIXED`, also the
  default) or with repeatable pseudo-random values (`MDT_RANDOM`). With an
  empty schema it returns a single `mock` column of `1`s.
- `servingkit.op_kernel`: `OpKernelOptions`, `ComputeContext`, the
  `OpKernel` base class and `OpKernelFactory` with `default_kernel_factory()`.
  `OpKernel.compute` reorders input columns to the kernel's input schemas,
  runs `do_compute`, and checks the output's row count and schema.

## Installation

```
pip install .
```

## Examples

Applying a link function:

```python
from servingkit.link_func import apply_link_func, parse_link_func_type

lf = parse_link_func_type("LF_SIGMOID_RAW")
print(apply_link_func(0.0, lf))  # 0.5
```

Fetching mock features:

```python
import servingkit.mock_adapter  # registers MockAdapter
from servingkit.feature_adapter import (
    FeatureParam, FeatureSourceConfig, FetchRequest, MockOptions, default_factory,
)
from servingkit.table import DataType, Field, Schema

schema = Schema([Field("x1", DataType.INT32), Field("x2", DataType.DOUBLE)])
config = FeatureSourceConfig(options=MockOptions())
adapter = default_factory().create(config, "service_id", "alice", schema)
response = adapter.fetch_feature(
    FetchRequest(fs_param=FeatureParam(query_datas=["0", "1"]))
)
print(response.features.num_rows)      # 2
print(response.features.column(0))     # [1, 1]
```

Writing and running a kernel:

```python
from types import SimpleNamespace

from servingkit.op_kernel import (
    ComputeContext, OpKernel, OpKernelOptions, default_kernel_factory,
)
from servingkit.table import DataType, Field, RecordBatch, Schema

SCHEMA = Schema([Field("x", DataType.DOUBLE)])


class Passthrough(OpKernel):
    def __init__(self, opts):
        super().__init__(opts)
        self.build_input_schema()
        self.build_output_schema()

    def build_input_schema(self):
        self.input_schemas = [SCHEMA]

    def build_output_schema(self):
        self.output_schema = SCHEMA

    def do_compute(self, ctx):
        ctx.output = ctx.inputs[0][0]


default_kernel_factory().register("PASSTHROUGH", Passthrough)
op_def = SimpleNamespace(
    name="PASSTHROUGH", inputs=["in"], tag=SimpleNamespace(variable_inputs=False)
)
node_def = SimpleNamespace(name="node_1", parents=["upstream"])
kernel = default_kernel_factory().create(OpKernelOptions(node_def, op_def))

table = RecordBatch(
    Schema([Field("y", DataType.INT32), Field("x", DataType.DOUBLE)]),
    [[1, 2], [0.5, 1.5]],
)
ctx = ComputeContext(inputs=[[table]])
kernel.compute(ctx)
print(ctx.output.column_by_name("x"))  # [0.5, 1.5]
```

Checking a value:

```python
from servingkit.errors import ServingError, enforce_lt

try:
    enforce_lt(5, 3, "index out of range")
except ServingError as err:
    print(err.code)  # ErrorCode.LOGIC_ERROR
```

## What this package does not do

- It is a library only: there is no command, server or network endpoint.
- The only feature source is `MockAdapter`; there is no adapter that reads
  features from files or fetches them over HTTP. Others can be added by
  subclassing `FeatureAdapter` and registering with `register_adapter`.
- It has no registry of operator definitions and no concrete kernels;
  `OpKernelOptions` takes any objects with the attributes the kernel reads.
- It does not configure logging.

## Running the tests

```
pip install .[test]
pytest
```