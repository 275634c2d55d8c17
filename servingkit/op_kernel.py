"""Operator kernels: run an operator on record batches, and their registry."""

from __future__ import annotations

import abc
import functools
import threading
from dataclasses import dataclass, field
from typing import Any

from servingkit.errors import ErrorCode, ServingError, enforce, enforce_eq, enforce_lt
from servingkit.table import RecordBatch, Schema


@dataclass(frozen=True)
class OpKernelOptions:
    """The graph node a kernel runs for and the definition of its operator.

    ``node_def`` needs ``name`` and ``parents``; ``op_def`` needs ``name``,
    ``inputs`` and ``tag.variable_inputs``.
    """

    node_def: Any
    op_def: Any


@dataclass
class ComputeContext:
    """Inputs of one computation and the output it produced.

    ``inputs`` is indexed first by input edge, then by party.
    """

    inputs: list[list[RecordBatch]] = field(default_factory=list)
    output: RecordBatch | None = None


class OpKernel(abc.ABC):
    """Base of operator kernels.

    Subclasses fill ``input_schemas`` and ``output_schema``, normally by
    calling :meth:`build_input_schema` and :meth:`build_output_schema` from
    their own constructor once their settings are in place.
    """

    def __init__(self, opts: OpKernelOptions) -> None:
        self.opts = opts
        if opts.op_def.tag.variable_inputs:
            # With variable inputs the count follows the node's parents.
            self.num_inputs = len(opts.node_def.parents)
        else:
            self.num_inputs = len(opts.op_def.inputs)
        self.input_schemas: list[Schema] = []
        self.output_schema: Schema = Schema()

    def input_schema(self, index: int) -> Schema:
        """The schema expected on input edge ``index``."""
        enforce_lt(index, len(self.input_schemas))
        return self.input_schemas[index]

    def compute(self, ctx: ComputeContext) -> None:
        """Conform the inputs to the input schemas, run, and check the output."""
        node_name = self.opts.node_def.name
        enforce(
            bool(ctx.inputs) and bool(ctx.inputs[0]),
            ErrorCode.LOGIC_ERROR,
            f"node: {node_name} has no inputs",
        )
        rows = ctx.inputs[0][0].num_rows
        enforce_eq(
            len(ctx.inputs),
            len(self.input_schemas),
            f"node: {node_name} schema size be equal to input edges",
        )

        for edge_index, (edge_inputs, schema) in enumerate(
            zip(ctx.inputs, self.input_schemas)
        ):
            for table in edge_inputs:
                enforce_eq(
                    rows,
                    table.num_rows,
                    f"node: {node_name} rows of all inputs tables should be equal",
                )
            if schema.num_fields > 0:
                ctx.inputs[edge_index] = [
                    table if table.schema == schema else table.select(schema)
                    for table in edge_inputs
                ]

        self.do_compute(ctx)

        output = ctx.output
        if output is None:
            raise ServingError(
                ErrorCode.LOGIC_ERROR, f"node: {node_name} produced no output"
            )
        enforce_eq(rows, output.num_rows, "rows of input and output be equal")
        if self.output_schema.num_fields > 0:
            enforce(
                output.schema == self.output_schema,
                ErrorCode.LOGIC_ERROR,
                f"node: {node_name} schema of output ({output.schema!r}) "
                f"should match output_schema ({self.output_schema!r})",
            )

    @abc.abstractmethod
    def do_compute(self, ctx: ComputeContext) -> None:
        """Compute ``ctx.output`` from ``ctx.inputs``."""

    @abc.abstractmethod
    def build_input_schema(self) -> None:
        """Fill ``input_schemas``."""

    @abc.abstractmethod
    def build_output_schema(self) -> None:
        """Fill ``output_schema``."""


class OpKernelFactory:
    """Maps operator names to kernel classes."""

    def __init__(self) -> None:
        self._creators: dict[str, type[OpKernel]] = {}
        self._lock = threading.Lock()

    def register(self, name: str, kernel_cls: type[OpKernel]) -> None:
        """Register ``kernel_cls`` for the operator called ``name``."""
        with self._lock:
            enforce(
                name not in self._creators,
                ErrorCode.LOGIC_ERROR,
                f"duplicated op kernel registered for {name}",
            )
            self._creators[name] = kernel_cls

    def create(self, opts: OpKernelOptions) -> OpKernel:
        """Build the kernel registered for ``opts.op_def``'s name."""
        name = opts.op_def.name
        with self._lock:
            creator = self._creators.get(name)
        if creator is None:
            raise ServingError(
                ErrorCode.UNEXPECTED_ERROR, f"no op kernel registered for {name}"
            )
        return creator(opts)


@functools.lru_cache(maxsize=None)
def default_kernel_factory() -> OpKernelFactory:
    """The process-wide kernel registry."""
    return OpKernelFactory()