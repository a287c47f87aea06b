# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
"""One-dimensional discrete Lehmann representation (DLR) nodes.

The real-frequency nodes of the DLR are taken from `sparse-ir`_: they are the
poles of its discrete Lehmann representation, which are selected according to
the extrema of the highest-order IR basis function on the real axis.  The
number of nodes fixes the DLR rank ``r`` for given cutoff and tolerance.

.. _sparse-ir: https://github.com/SpM-lab/sparse-ir
"""
import numpy as np
import sparse_ir

from . import _util
from . import kernel as _kernel


def build_dlr_rf(lambda_, eps):
    """Build DLR real-frequency nodes for given cutoff and tolerance.

    Arguments:
        lambda_ (float):
            Dimensionless cutoff ``beta * wmax``; the nodes lie in
            ``[-lambda_, lambda_]``.
        eps (float):
            Error tolerance of the representation.

    Returns:
        Ascending array of ``r`` real-frequency nodes, where ``r`` is the
        DLR rank.
    """
    lambda_ = _util.check_positive(lambda_, "cutoff lambda")
    eps = _util.check_positive(eps, "tolerance eps")

    # At unit inverse temperature, the frequency cutoff is simply lambda.
    # The real-frequency sampling points do not depend on statistics, as
    # the logistic kernel is used for both.
    basis = sparse_ir.FiniteTempBasis('F', 1.0, lambda_, eps=eps)
    return np.sort(np.asarray(basis.default_omega_sampling_points(), float))


def build_dlr_if(lambda_, rfnodes, statistics='F', *, nmax=None):
    """Build DLR imaginary-frequency nodes in one dimension.

    Selects the ``r`` Matsubara indices for which the kernel matrix
    ``K(n, rfnodes)`` is best conditioned, using a column-pivoted QR
    decomposition over all indices ``n`` in the fine grid ``[-nmax, nmax)``
    (fermions) or ``[-nmax, nmax]`` (bosons).

    Arguments:
        lambda_ (float):
            Dimensionless cutoff, used to size the fine grid.
        rfnodes (array):
            DLR real-frequency nodes, as returned by :func:`build_dlr_rf`.
        statistics (str):
            ``'F'`` for fermions, ``'B'`` for bosons.
        nmax (int):
            Extent of the fine grid.  Defaults to ``max(ceil(lambda_), r)``.

    Returns:
        Ascending integer array of ``r`` Matsubara indices.
    """
    rfnodes = np.asarray(rfnodes, float)
    if rfnodes.ndim != 1:
        raise ValueError("real-frequency nodes must be a vector")
    _util.check_statistics(statistics)
    r = rfnodes.size
    if nmax is None:
        nmax = max(int(np.ceil(lambda_)), r)

    fine = np.arange(-nmax, nmax + (statistics == 'B'))
    if fine.size < r:
        raise ValueError(f"fine grid has {fine.size} points, fewer than the "
                         f"DLR rank {r}")

    kmat = _kernel.matsubara_kernel(fine[:, None], rfnodes[None, :],
                                    statistics)
    return np.sort(fine[_util.pivoted_columns(kmat.T, r)])
