"""
Activations Package

This package provides the activation function used by evochase networks.

Exported:
    tanh_activation:  Hyperbolic tangent with exact saturation outside [-10, 10]
    SATURATION_LIMIT: The magnitude beyond which the activation saturates
"""

from evochase.activations.basic_activations import SATURATION_LIMIT, tanh_activation

__all__ = ['SATURATION_LIMIT',
           'tanh_activation']
