"""Tensors, quantized operations, column layouts and proof file formats for circuit-friendly computation."""

__version__ = "0.1.0"
__all__ = ["tensor", "ops", "activations", "proof", "layout"]