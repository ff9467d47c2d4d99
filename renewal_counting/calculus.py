"""Numerical calculus on sampled functions.

Everything here works on functions sampled at a sequence of points, either
given explicitly (an abscissa vector ``x``) or implicitly by a constant step
``h``. The renewal recursion in :mod:`renewal_counting.counting` calls
:func:`trapezint` on growing prefixes of its arrays thousands of times, so it
only ever touches the views it is handed.
"""
import numpy as np

# relative tolerance used to decide whether a time grid is equally spaced
GRID_RTOL = 1e-8

__all__ = ['trapezint', 'fdderiv', 'mag', 'grid_step', 'GRID_RTOL']


def trapezint(x, y):
    r"""Integral of `y` versus `x` using the trapezoidal rule.

    Parameters
    ----------
    x : float or (N,) array_like
        Either the abscissas at which `y` was sampled (strictly increasing), or
        a single number, in which case `y` is assumed to be sampled with that
        constant step.
    y : (N,) array_like
        Values of the function.

    Returns
    -------
    integral : float
        :math:`\sum_i (x_{i+1} - x_i)(y_{i+1} + y_i)/2`, or
        :math:`h\sum_i (y_{i+1} + y_i)/2` for a constant step :math:`h`.

    Notes
    -----
    The integral over fewer than two points is defined to be zero, which is
    what the survival function relies on at :math:`t = 0`.

    Slices of numpy arrays are views, so integrating over a prefix ``y[:k]``
    costs O(k).
    """
    y = np.asarray(y, dtype=float)
    if y.size < 2:
        return 0.0
    if np.isscalar(x):
        return 0.5*x*(2*np.sum(y) - y[0] - y[-1])
    x = np.asarray(x, dtype=float)
    if x.shape != y.shape:
        raise ValueError("x and y must have the same length, got "
                         f"{x.shape} and {y.shape}.")
    return 0.5*np.dot(x[1:] - x[:-1], y[1:] + y[:-1])


def fdderiv(x, y, out=None):
    """Derivative of `y` versus `x` using the forward difference approximation.

    `x` can be the abscissa vector or a constant step. The last element of the
    derivative cannot be computed, so it is set equal to the second-to-last.
    If `out` is passed the result is written into it in place.
    """
    y = np.asarray(y, dtype=float)
    if y.size < 2:
        raise ValueError("Need at least two samples to take a derivative.")
    if out is None:
        out = np.zeros_like(y)
    dx = x if np.isscalar(x) else np.diff(np.asarray(x, dtype=float))
    out[:-1] = np.diff(y)/dx
    out[-1] = out[-2]
    return out


def mag(x):
    """Return the order of magnitude of a number."""
    return np.ceil(np.log10(x))


def grid_step(t, rtol=GRID_RTOL):
    """Step of an equally-spaced grid.

    Raises
    ------
    ValueError
        If `t` has fewer than two points, is not strictly increasing, or its
        spacing differs from the mean spacing by more than `rtol`.
    """
    t = np.asarray(t, dtype=float)
    if t.ndim != 1 or t.size < 2:
        raise ValueError("Input `t` must be a 1D grid with at least two "
                         "points.")
    h = (t[-1] - t[0])/(t.size - 1)
    if not h > 0:
        raise ValueError("Input `t` must be strictly increasing.")
    if not np.all(np.isclose(np.diff(t), h, rtol=rtol, atol=0)):
        raise ValueError("Input `t` must be equally spaced (have a step).")
    return h
