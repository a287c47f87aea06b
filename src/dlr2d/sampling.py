# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
import warnings
import numpy as np
import scipy.linalg as sp_linalg

from . import _util
from . import kernel as _kernel

# Largest condition number of the coefficients to values matrix which is
# accepted without a ConditioningWarning.
MAX_COND = 1e8


def build_cf2if(rfnodes, ifnodes):
    """Build transformation matrix from 2D DLR coefficients to values.

    Returns the matrix ``A`` with ``A[i, k] = phi(n[i], m[i], w[k])``, where
    ``(n[i], m[i])`` are the 2D imaginary-frequency nodes, ``w[k]`` are the
    real-frequency nodes and ``phi`` is :func:`kernel.matsubara_kernel_2d`.
    In this way, for a vector of DLR coefficients ``gc``, ``A @ gc`` are the
    values of the expansion on the 2D grid.
    """
    rfnodes = np.asarray(rfnodes, float)
    if rfnodes.ndim != 1:
        raise ValueError("real-frequency nodes must be a vector")
    ifnodes = _util.check_nodes_2d(ifnodes)

    return _kernel.matsubara_kernel_2d(
                ifnodes[:, 0, None], ifnodes[:, 1, None], rfnodes[None, :])


class LUDecomposedMatrix:
    """Square matrix in LU decomposed form for fast repeated solves.

    Stores a matrix ``A`` together with its LU decomposition with partial
    pivoting in LAPACK ``getrf`` layout::

        A == P @ L @ U,

    where ``L`` (unit diagonal) and ``U`` are packed into the single matrix
    ``lu``, and ``piv`` encodes the row interchanges ``P`` (0-based).  This
    reduces the cost of each subsequent ``A.solve(x)`` to ``O(n**2)`` per
    right hand side.

    Instead of factorizing ``A``, one can also supply a previously computed
    pair ``lu_result = (lu, piv)``, which is used without recomputation.
    """
    def __init__(self, a, lu_result=None):
        a = np.asarray(a)
        if a.ndim != 2 or a.shape[0] != a.shape[1]:
            raise ValueError("a must be a square matrix")
        if lu_result is None:
            with warnings.catch_warnings():
                # Exactly singular matrices are reported below
                warnings.simplefilter("ignore", sp_linalg.LinAlgWarning)
                lu, piv = sp_linalg.lu_factor(a)
        else:
            lu, piv = _util.check_lu_result(lu_result, a.shape)

        _check_nonsingular(lu)
        self._a = a
        self._lu = lu
        self._piv = piv

    def __matmul__(self, x):
        """Matrix-matrix multiplication."""
        return self._a @ x

    def matmul(self, x, axis=None):
        """Compute ``A @ x`` (optionally along specified axis of x)"""
        if axis is None:
            return self._a @ x
        return _util.matop_along_axis(self._a.__matmul__, x, axis)

    def _solve(self, x):
        # lu_solve works on a Fortran-ordered copy, which we make explicit
        # here so x itself is never touched.
        dtype = np.result_type(self._lu.dtype, x.dtype)
        b = np.array(x, dtype=dtype, order='F')
        if b.size == 0:
            return b
        return sp_linalg.lu_solve((self._lu, self._piv), b,
                                  overwrite_b=True, check_finite=False)

    def solve(self, x, axis=None):
        """Return ``y`` such that ``A @ y == x``"""
        if axis is None:
            return self._solve(np.asarray(x))
        return _util.matop_along_axis(self._solve, x, axis)

    def __array__(self, dtype=None, copy=None):
        """Convert to numpy array."""
        return self._a if dtype is None else self._a.astype(dtype)

    @property
    def a(self):
        """Full matrix"""
        return self._a

    @property
    def lu(self):
        """LU factors (L below, U on and above the diagonal)"""
        return self._lu

    @property
    def piv(self):
        """Pivot indices: row ``i`` was interchanged with row ``piv[i]``"""
        return self._piv

    @property
    def cond(self):
        """Condition number of matrix"""
        return np.linalg.cond(self._a)


class SingularMatrixError(np.linalg.LinAlgError):
    """Raised if the coefficients to values matrix is singular.

    This means that the chosen combination of cutoff and tolerance (or the
    supplied grid) does not yield a valid 2D DLR grid.  The factorization
    is not retried: other parameters must be chosen.
    """
    pass


class ConditioningWarning(RuntimeWarning):
    """Warns about a poorly conditioned problem.

    This warning is issued if the library detects a poorly conditioned
    transformation between values and coefficients.  One must expect to lose
    significant precision in the coefficients.
    """
    pass


def _check_nonsingular(lu):
    udiag = np.abs(np.diag(lu))
    if udiag.size == 0:
        return
    tol = udiag.size * np.finfo(lu.dtype).eps * udiag.max()
    if not (udiag.min() > tol):
        raise SingularMatrixError(
                f"matrix is numerically singular: smallest pivot is "
                f"{udiag.min():.2g}, largest {udiag.max():.2g}")
