r"""Event-count statistics of renewal processes.

Given the interarrival density :math:`f(t)` of a renewal process, sampled on
an equally-spaced grid, the density of the time of the :math:`j`-th event is
the :math:`j`-fold convolution

.. math::

    Q_1(t) = f_1(t), \quad Q_j(t) = \int_0^t f(s) Q_{j-1}(t - s) ds,

where :math:`f_1` is the density of the first interarrival time (equal to
:math:`f` unless the process was started "asynchronously"). The probability
of having seen exactly :math:`j` events by time :math:`t` is then

.. math::

    P_0(t) = 1 - \int_0^t f_1(s) ds, \quad
    P_j(t) = \int_0^t W(s) Q_j(t - s) ds,

with :math:`W(t) = 1 - \int_0^t f(s) ds` the survival function of a generic
interarrival time.

A typical workflow, given a Beta-distributed interarrival time, is

.. code-block:: python

    >>> t = np.linspace(0, 1, 101)
    >>> realt, Q, P = renewal_counting(3, t, scipy.stats.beta(2, 2).pdf(t))
    >>> plt.plot(realt, P)

Each convolution is a trapezoidal-rule integral, so the cost is
:math:`O(nL^2)` for a result of length :math:`L`. Pass ``method='fft'`` to
compute the same sums in :math:`O(nL\log L)`.
"""
from collections import namedtuple
import warnings

import numpy as np
import pandas as pd
from scipy.signal import fftconvolve

from .calculus import trapezint, grid_step, GRID_RTOL

# the input pdf is renormalized if its integral is further than this from one
NORMALIZATION_RTOL = np.sqrt(np.finfo(float).eps)
# each Q_j is rescaled if its integral is further than this from one
CONVOLUTION_RTOL = 1e-14

__all__ = ['renewal_counting', 'trapezoidal_convolve', 'survival_function',
           'RenewalCounting', 'Diagnostic', 'NormalizationWarning',
           'NORMALIZATION_RTOL', 'CONVOLUTION_RTOL']


class NormalizationWarning(UserWarning):
    """An input density did not integrate to one and was rescaled."""


Diagnostic = namedtuple('Diagnostic', ['name', 'integral', 'message'])


class RenewalCounting(namedtuple('RenewalCounting', ['realt', 'Q', 'P'])):
    """Output of :func:`renewal_counting`.

    Unpacks like the tuple ``(realt, Q, P)``. The remaining attributes are
    the intermediate quantities of the calculation.

    Attributes
    ----------
    realt : (L,) array_like
        Extended time grid, starting at zero with the step of the input grid.
    Q : (L, n) array_like
        Column ``j-1`` is the pdf of the time of the ``j``-th event.
    P : (L, n+1) array_like
        Column ``j`` is the probability of exactly ``j`` events by time
        ``realt``.
    survival : (L,) array_like
        Survival function of a generic interarrival time.
    pdf, first_pdf : (l,) array_like
        The (renormalized, if needed) densities on the input grid.
    step : float
        Step of the time grids.
    mean_interarrival : float
        Mean of the (renormalized) interarrival density.
    diagnostics : List[Diagnostic]
        One entry per input density that had to be renormalized.
    """

    def __new__(cls, realt, Q, P, survival=None, pdf=None, first_pdf=None,
                step=None, mean_interarrival=None, diagnostics=None):
        self = super().__new__(cls, realt, Q, P)
        self.survival = survival
        self.pdf = pdf
        self.first_pdf = first_pdf
        self.step = step
        self.mean_interarrival = mean_interarrival
        self.diagnostics = [] if diagnostics is None else diagnostics
        return self

    def to_frame(self, kind='P'):
        """Tabulate `P` (or `Q`, for ``kind='Q'``) versus time.

        Columns are labeled by the number of events, so that ``df[j]`` is
        :math:`P_j` (or :math:`Q_j`).
        """
        if kind == 'P':
            values, first = self.P, 0
        elif kind == 'Q':
            values, first = self.Q, 1
        else:
            raise ValueError("kind must be one of 'P' or 'Q'.")
        df = pd.DataFrame(
            values,
            index=pd.Index(self.realt, name='t'),
            columns=pd.RangeIndex(first, first + values.shape[1], name='j'),
        )
        return df


def trapezoidal_convolve(f, g, step, method='direct'):
    r"""Trapezoidal-rule convolution of two uniformly sampled functions.

    Computes :math:`(f * g)(t_k) = \int_0^{t_k} f(s) g(t_k - s) ds` at each
    grid point :math:`t_k = k h`, for :math:`k < L`, where :math:`L` is the
    common length of `f` and `g`.

    Parameters
    ----------
    f, g : (L,) array_like
        Functions sampled at ``step*np.arange(L)``.
    step : float
        Grid spacing :math:`h`.
    method : str, default: 'direct'
        ``'direct'`` integrates `f` against the time-reversed `g` over each
        prefix of the grid. ``'fft'`` forms the same sums with
        :func:`scipy.signal.fftconvolve` and applies the trapezoidal end-point
        correction afterwards. The two agree to rounding error.

    Returns
    -------
    conv : (L,) array_like
        The convolution. ``conv[0]`` is always zero.
    """
    f = np.asarray(f, dtype=float)
    g = np.asarray(g, dtype=float)
    if f.shape != g.shape or f.ndim != 1:
        raise ValueError("f and g must be 1D arrays of the same length.")
    L = f.size
    conv = np.zeros(L)
    if method == 'direct':
        # g(t_k - s) over s in [0, t_k] is the last k+1 entries of reversed g
        reverse_g = g[::-1]
        for k in range(1, L):
            conv[k] = trapezint(step, f[:k+1]*reverse_g[L-k-1:])
    elif method == 'fft':
        riemann = fftconvolve(f, g)[:L]
        conv[1:] = step*(riemann[1:] - 0.5*(f[0]*g[1:] + g[0]*f[1:]))
    else:
        raise ValueError(f"Unknown convolution method: {method!r}.")
    return conv


def survival_function(t, pdf, L=None, offset=0):
    """Survival function of a density sampled on `t`.

    Computes ``1 - trapezint(t[:i+1], pdf[:i+1])`` for each prefix of the
    grid. If `L` is passed, the result is placed at position `offset` in an
    array of length `L` which is one before the support and constant after
    it.
    """
    t = np.asarray(t, dtype=float)
    pdf = np.asarray(pdf, dtype=float)
    l = t.size
    if L is None:
        L = offset + l
    sf = np.ones(L)
    for i in range(l):
        sf[offset + i] = 1 - trapezint(t[:i+1], pdf[:i+1])
    # no more mass past the end of the support
    sf[offset + l:] = sf[offset + l - 1]
    return sf


def _checked_density(name, t, pdf, rtol):
    """Validate a density on `t`, returning a normalized copy and (possibly)
    a Diagnostic describing the renormalization."""
    pdf = np.array(pdf, dtype=float)
    if pdf.shape != t.shape:
        raise ValueError(f"`{name}` must have the same length as `t`.")
    if not np.all(np.isfinite(pdf)) or np.any(pdf < 0):
        raise ValueError(f"`{name}` must be finite and non-negative.")
    integral = trapezint(t, pdf)
    if not integral > 0:
        raise ValueError(f"`{name}` has zero integral versus `t`, cannot "
                         "normalize it.")
    if np.isclose(integral, 1, rtol=rtol, atol=0):
        return pdf, None
    message = (f"Integral of `{name}` versus t was {integral}, not 1. "
               "Using a re-normalized copy instead...")
    warnings.warn(message, NormalizationWarning, stacklevel=3)
    return pdf/integral, Diagnostic(name, integral, message)


def renewal_counting(n, t, pdf, first_pdf=None, method='direct',
                     progress_bar=False, grid_rtol=GRID_RTOL,
                     normalization_rtol=NORMALIZATION_RTOL,
                     convolution_rtol=CONVOLUTION_RTOL):
    """
    Event-time pdfs and event-count probabilities of a renewal process.

    Recursively calculates the pdf of the `j`-th event happening at time `t`,
    as well as the probability to have `j` events occurring up to time `t`,
    for every `j` up to `n`.

    Parameters
    ----------
    n : int
        The number of events you care about. Everything from ``j=1`` (``j=0``
        for `P`) up to ``j=n`` is calculated.
    t : (l,) array_like
        Equally-spaced times at which `pdf` is sampled. Must start at zero or
        at a positive multiple of the step.
    pdf : (l,) array_like
        The histogram (pdf) of the interarrival times. It should be
        integral-normalized versus `t`; if it is not, a re-normalized copy is
        used and a :class:`NormalizationWarning` is issued. The pdf is
        expected to be calculated with **left-closed** bins and to have
        finite support, i.e. to be zero for any time not in `t`.
    first_pdf : (l,) array_like, optional
        The pdf of the *first* interarrival time, if it differs from `pdf`.
    method : str, default: 'direct'
        How to compute each convolution, see :func:`trapezoidal_convolve`.
    progress_bar : bool, default: False
        Print the convolution level currently being computed.
    grid_rtol, normalization_rtol, convolution_rtol : float
        Tolerances for, respectively, deciding that `t` is equally spaced,
        that the input densities are normalized, and that each `Q` column
        still integrates to one.

    Returns
    -------
    result : RenewalCounting
        Unpacks as ``realt, Q, P``:

        realt : (L,) array_like
            Time vector of length ``L = l*(n+1) - n`` (for `t` starting at
            zero).
        Q : (L, n) array_like
            Column ``j-1`` is the **pdf** of the ``j``-th event versus
            `realt`.
        P : (L, n+1) array_like
            Column ``j`` is the **probability** to have a total of ``j``
            events up to time `realt`.

    Raises
    ------
    ValueError
        If `t` is not equally spaced, does not lie on a grid starting at
        zero, or if `n` or the densities are invalid.
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise ValueError("Number of events `n` must be a positive integer.")
    t = np.asarray(t, dtype=float)
    h = grid_step(t, rtol=grid_rtol)
    # where t[0] falls on the step grid starting at zero
    offset = int(np.round(t[0]/h))
    if offset < 0 or not np.isclose(t[0], offset*h, rtol=grid_rtol,
                                    atol=grid_rtol*h):
        raise ValueError("Input `t` must start at zero or at a positive "
                         "multiple of its step.")
    l = t.size
    num_steps = offset + l - 1  # tmax/h

    diagnostics = []
    pdf, diag = _checked_density('pdf', t, pdf, normalization_rtol)
    if diag is not None:
        diagnostics.append(diag)
    if first_pdf is None:
        first_pdf = pdf
    else:
        first_pdf, diag = _checked_density('first_pdf', t, first_pdf,
                                           normalization_rtol)
        if diag is not None:
            diagnostics.append(diag)

    # this is the time vector everything else will be a function of, long
    # enough to hold n convolutions of the support [0, tmax]
    L = (n + 1)*num_steps + 1
    realt = h*np.arange(L)
    f = np.zeros(L)
    f[offset:offset + l] = pdf
    mean_interarrival = trapezint(h, realt*f)

    W = survival_function(t, pdf, L, offset)
    # P_0 is the survival function of the first event
    P = np.zeros((L, n + 1))
    P[:, 0] = survival_function(t, first_pdf, L, offset)
    # Q_1 is the pdf of the first event
    Q = np.zeros((L, n))
    Q[offset:offset + l, 0] = first_pdf
    for j in range(1, n + 1):
        if progress_bar:
            print(f'\r{j:d}/{n:d}\r', end='')
        if j > 1:
            Q[:, j-1] = trapezoidal_convolve(f, Q[:, j-2], h, method)
            qint = trapezint(realt, Q[:, j-1])
            # otherwise the trapezoid error compounds at every level
            if not np.isclose(qint, 1, rtol=convolution_rtol, atol=0):
                Q[:, j-1] /= qint
        P[:, j] = trapezoidal_convolve(W, Q[:, j-1], h, method)
    return RenewalCounting(realt, Q, P, survival=W, pdf=pdf,
                           first_pdf=first_pdf, step=h,
                           mean_interarrival=mean_interarrival,
                           diagnostics=diagnostics)
