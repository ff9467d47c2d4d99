r"""Counting statistics of renewal processes from a sampled interarrival pdf.

Suppose events happen one after another, separated by independent waiting
times drawn from a distribution with density :math:`f(t)` (the first waiting
time may optionally have its own density). This package computes, from
:math:`f` sampled on an equally-spaced grid,

* :math:`Q_j(t)`, the pdf of the time at which the :math:`j`-th event occurs,
* :math:`P_j(t)`, the probability that exactly :math:`j` events have occurred
  by time :math:`t`,

by repeated numerical (trapezoidal) convolution. See
:func:`renewal_counting.counting.renewal_counting`.
"""
from .calculus import *
from .counting import *

__version__ = "0.1.0"
