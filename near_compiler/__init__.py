"""HTTP service that compiles NEAR smart contracts to wasm."""

__version__ = "0.1.0"
