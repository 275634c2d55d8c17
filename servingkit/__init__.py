"""Model-serving building blocks: error checks, link functions, record batches, feature adapters and operator kernels."""

__version__ = "0.1.0"