"""Load an ExchangeOracle implementation from a ``module:attribute`` path."""

import importlib

from cashswap.exchange.oracle import ExchangeOracle


def load_oracle(path: str) -> ExchangeOracle:
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Expected 'module:attribute', got {path!r}")
    factory = getattr(importlib.import_module(module_name), attr)
    oracle = factory()
    if not isinstance(oracle, ExchangeOracle):
        raise TypeError(f"{path} did not produce an ExchangeOracle (got {type(oracle).__name__})")
    return oracle
