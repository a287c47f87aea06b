# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
import numpy as np
import scipy.linalg as sp_linalg


def check_matsubara_index(n):
    """Checks that ``n`` is a (set of) Matsubara frequency indices.

    A Matsubara index is any integer ``n``, which labels the frequency
    ``(2*n + 1) * pi`` for fermions and ``2 * n * pi`` for bosons (the
    inverse temperature is absorbed into the cutoff).  Floating point values
    are accepted as long as they are integral.
    """
    n = np.asarray(n)
    if not np.issubdtype(n.dtype, np.integer):
        nfloat = n
        n = nfloat.astype(int)
        if not (n == nfloat).all():
            raise ValueError("Matsubara index n must be integer")
    return n


def check_statistics(statistics):
    if statistics not in ('F', 'B'):
        raise ValueError("statistics must either be 'B' (for bosons) "
                         "or 'F' (for fermions)")
    return statistics


def check_positive(x, name):
    """Checks that ``x`` is a finite, positive real number"""
    x = float(x)
    if not (x > 0) or not np.isfinite(x):
        raise ValueError(f"{name} must be a positive number, got {x}")
    return x


def check_leading_dim(x, size, axis=0, what="array"):
    """Checks that ``x`` has extent ``size`` along ``axis``"""
    x = np.asarray(x)
    if x.ndim == 0:
        raise ValueError(f"{what} must have at least one dimension")
    if x.shape[axis] != size:
        raise ValueError(f"{what} has {x.shape[axis]} entries along axis "
                         f"{axis}, but the DLR rank is {size}")
    return x


def check_nodes_2d(nodes):
    """Checks that ``nodes`` is a list of Matsubara index pairs"""
    nodes = check_matsubara_index(nodes)
    if nodes.ndim != 2 or nodes.shape[1] != 2:
        raise ValueError(f"index pairs must be of shape (N, 2), "
                         f"got {nodes.shape}")
    return nodes


def check_lu_result(lu_result, matrix_shape=None):
    """Checks that argument is a valid LU factorization pair (lu, piv)"""
    lu, piv = map(np.asarray, lu_result)
    if lu.ndim != 2 or lu.shape[0] != lu.shape[1]:
        raise ValueError(f"LU factors must be a square matrix, "
                         f"got {lu.shape}")
    if piv.shape != lu.shape[:1]:
        raise ValueError(f"shape mismatch between LU factors {lu.shape} "
                         f"and pivots {piv.shape}")
    if not np.issubdtype(piv.dtype, np.integer):
        raise ValueError("pivots must be integer")
    if not ((piv >= 0) & (piv < lu.shape[0])).all():
        raise ValueError("pivot indices are out of range")
    if matrix_shape is not None and lu.shape != tuple(matrix_shape):
        raise ValueError(f"shape mismatch between LU factors {lu.shape} "
                         f"and matrix {tuple(matrix_shape)}")
    return lu, piv


def matop_along_axis(op, x, axis=0):
    """Apply ``op`` to ``x`` reshaped as a matrix with ``axis`` as rows.

    Moves ``axis`` to the front, flattens all other axes into columns,
    applies ``op`` to the resulting matrix and restores the original layout.
    """
    x = np.asarray(x)
    x = np.moveaxis(x, axis, 0)
    shape = x.shape
    r = op(x.reshape(shape[0], int(np.prod(shape[1:]))))
    r = r.reshape(r.shape[:1] + shape[1:])
    return np.moveaxis(r, 0, axis)


def pivoted_columns(a, r):
    """Return indices of the ``r`` columns of ``a`` selected by pivoted QR.

    The column-pivoted QR decomposition is rank-revealing: its first ``r``
    pivots are the ``r`` most linearly independent columns of ``a``.  The
    selection is deterministic for given input.
    """
    a = np.asarray(a)
    if a.shape[1] < r:
        raise ValueError(f"cannot select {r} out of {a.shape[1]} columns")
    _, piv = sp_linalg.qr(a, mode='r', pivoting=True)
    return piv[:r]
