# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
import numpy as np

from . import _util
from . import dlr
from . import kernel as _kernel


def build_dlr2d_if(lambda_, eps, *, rfnodes=None, reduced=True,
                   niom_dense=None):
    """Build 2D DLR imaginary-frequency grid.

    Selects ``r`` pairs of (fermionic) Matsubara indices ``(n, m)``, where
    ``r`` is the rank of the one-dimensional DLR for the same cutoff and
    tolerance.  Sampling a function in the span of the 2D DLR basis at these
    pairs determines its DLR coefficients::

               ___________________                 ___________________
              |                   |  build_cf2if  |                   |
              |  Real-frequency   |-------------->|  Matsubara index  |
              |  nodes  w[k]      |               |  pairs (n, m)[i]  |
              |___________________|               |___________________|

    The pairs are picked from a candidate grid, which is the Cartesian
    product of a one-dimensional set of indices with itself, by a column
    pivoted QR decomposition of the matrix of basis functions evaluated on
    the candidate grid.  Each candidate row is scaled to unit norm first,
    so pairs are selected by linear independence rather than by magnitude
    (the basis functions decay like ``1/(|n| |m|)``).

    Arguments:
        lambda_ (float):
            Dimensionless cutoff ``beta * wmax``.
        eps (float):
            Error tolerance.
        rfnodes (array):
            DLR real-frequency nodes.  If omitted, they are computed using
            :func:`dlr.build_dlr_rf`.
        reduced (bool):
            If true (the default), the one-dimensional candidate set consists
            of the ``r`` one-dimensional DLR Matsubara nodes, giving ``r**2``
            candidate pairs.  Otherwise, all indices in the dense range
            ``[-niom_dense, niom_dense)`` are used.
        niom_dense (int):
            Extent of the dense candidate grid, only used if ``reduced`` is
            false.  Defaults to ``max(ceil(lambda_), r)``.

    Returns:
        Integer array of shape ``(r, 2)`` with distinct index pairs, sorted
        lexicographically.
    """
    if rfnodes is None:
        rfnodes = dlr.build_dlr_rf(lambda_, eps)
    else:
        _util.check_positive(lambda_, "cutoff lambda")
        _util.check_positive(eps, "tolerance eps")
        rfnodes = np.asarray(rfnodes, float)
    r = rfnodes.size

    if reduced:
        candidates_1d = dlr.build_dlr_if(lambda_, rfnodes, 'F')
    else:
        if niom_dense is None:
            niom_dense = max(int(np.ceil(lambda_)), r)
        candidates_1d = np.arange(-niom_dense, niom_dense)

    # Candidates are enumerated in lexicographic order, so sorting the
    # selected candidate indices sorts the pairs.
    n, m = np.meshgrid(candidates_1d, candidates_1d, indexing='ij')
    candidates = np.column_stack([n.ravel(), m.ravel()])

    phi = _kernel.matsubara_kernel_2d(
                candidates[:, 0, None], candidates[:, 1, None],
                rfnodes[None, :])
    phi /= np.linalg.norm(phi, axis=1, keepdims=True)
    selected = np.sort(_util.pivoted_columns(phi.T, r))
    return candidates[selected]
