"""Scalar transfer functions referenced by neurons."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping

from .substrate import ActivationType

ActivationFunction = Callable[[float], float]


def _sigmoid(x: float) -> float:
    if x >= 0:
        z = math.exp(-x)
        return 1.0 / (1.0 + z)
    z = math.exp(x)
    return z / (1.0 + z)


def direct(x: float) -> float:
    return x


def sigmoid(x: float) -> float:
    return _sigmoid(x)


def steepened_sigmoid(x: float) -> float:
    return _sigmoid(4.9 * x)


def tanh(x: float) -> float:
    return math.tanh(0.9 * x)


def inverse_abs(x: float) -> float:
    return x / (1.0 + abs(x))


ACTIVATIONS: Mapping[ActivationType, ActivationFunction] = {
    ActivationType.DIRECT: direct,
    ActivationType.SIGMOID: sigmoid,
    ActivationType.STEEPENED_SIGMOID: steepened_sigmoid,
    ActivationType.TANH: tanh,
    ActivationType.INVERSE_ABS: inverse_abs,
}


def activation_function(activation_type: ActivationType | str) -> ActivationFunction:
    """Look up the transfer function for an activation type."""
    try:
        return ACTIVATIONS[ActivationType.coerce(activation_type)]
    except (KeyError, TypeError) as error:
        msg = f"Unknown activation function: {activation_type!r}"
        raise ValueError(msg) from error


def activate(activation_type: ActivationType | str, x: float) -> float:
    """Apply the named transfer function to ``x``."""
    return activation_function(activation_type)(x)


__all__ = [
    "ACTIVATIONS",
    "ActivationFunction",
    "activate",
    "activation_function",
    "direct",
    "inverse_abs",
    "sigmoid",
    "steepened_sigmoid",
    "tanh",
]
