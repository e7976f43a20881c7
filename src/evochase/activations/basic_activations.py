import numpy as np

# Beyond this magnitude tanh is indistinguishable from +/-1
SATURATION_LIMIT = 10.0

def tanh_activation(z):
    """
    Hyperbolic tangent, returning exactly +1.0 above SATURATION_LIMIT
    and exactly -1.0 below -SATURATION_LIMIT. Works on scalars and arrays.
    """
    z = np.asarray(z, dtype=float)
    result = np.where(z > SATURATION_LIMIT, 1.0,
                      np.where(z < -SATURATION_LIMIT, -1.0, np.tanh(z)))
    if result.ndim == 0:
        return float(result)
    return result
