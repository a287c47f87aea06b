# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
from warnings import warn
import numpy as np

from . import _util
from . import dlr
from . import grid
from . import kernel as _kernel
from . import sampling


class ImfreqOps2D:
    """Two-dimensional DLR operations in imaginary frequency.

    For a two-particle correlation function ``G(n, m)`` on a pair of
    fermionic Matsubara indices, this class stores the two-dimensional
    discrete Lehmann representation (DLR)::

        G(n, m) ≈ sum(gc[k] * K(n, w[k]) * K(m, w[k]) for k in range(r))

    where ``w`` are the ``r`` DLR real-frequency nodes and ``K`` is the
    analytic continuation kernel :func:`kernel.matsubara_kernel`.  The
    coefficients ``gc`` are pinned by the values of ``G`` on a grid of ``r``
    index pairs, the 2D DLR imaginary-frequency nodes::

             ________________                   ___________________
            |                |    coefs2vals   |                   |
            |      DLR       |---------------->|    Values on      |
            |  coefficients  |<----------------|   2D DLR nodes    |
            |________________|    vals2coefs   |___________________|
                    |
                    |  coefs2eval
                    v
              G(n, m) at any (n, m)

    The first dimension of all Green's function and coefficient arrays
    (or the dimension selected by ``axis``) must be the DLR rank ``r``; all
    other dimensions are treated independently (e.g., orbital indices).

    The LU decomposition of the transformation from coefficients to values
    is computed once on construction, so each transformation afterwards
    costs ``O(r**2)`` per entry of the trailing dimensions.  Instances are
    immutable and can be shared freely.

    Example:
        The following example code expands a function with a single pole
        at ``w = 2.5``::

            import dlr2d
            ops = dlr2d.ImfreqOps2D(lambda_=10, eps=1e-8)
            n, m = ops.get_ifnodes().T
            g = dlr2d.matsubara_kernel_2d(n, m, 2.5)
            gc = ops.vals2coefs(g)
            g_off_grid = ops.coefs2eval(gc, 12, -7)
    """
    def __init__(self, lambda_, eps, *, reduced=True, niom_dense=None):
        rfnodes = dlr.build_dlr_rf(lambda_, eps)
        ifnodes = grid.build_dlr2d_if(lambda_, eps, rfnodes=rfnodes,
                                      reduced=reduced, niom_dense=niom_dense)
        cf2if = sampling.build_cf2if(rfnodes, ifnodes)
        if2cf = sampling.LUDecomposedMatrix(cf2if)

        cond = if2cf.cond
        if not (cond <= sampling.MAX_COND):
            warn(f"2D DLR grid is poorly conditioned (kappa = {cond:.2g})",
                 sampling.ConditioningWarning, 2)

        self._set_state(lambda_, eps, rfnodes, ifnodes, cf2if,
                        (if2cf.lu, if2cf.piv))

    @classmethod
    def build(cls, lambda_, eps, **kwargs):
        """Build operations for cutoff ``lambda_`` and tolerance ``eps``.

        Selects the real- and imaginary-frequency nodes and factorizes the
        transformation.  Same as calling the constructor.
        """
        return cls(lambda_, eps, **kwargs)

    @classmethod
    def restore_from(cls, lambda_, eps, rfnodes, ifnodes, cf2if, if2cf_lu,
                     if2cf_piv):
        """Restore operations from precomputed nodes and matrices.

        Trusts the supplied data: neither the nodes are selected nor the
        transformation is factorized again.  The DLR rank is taken from the
        number of columns of ``cf2if``.
        """
        cf2if = np.asarray(cf2if)
        if cf2if.ndim != 2:
            raise ValueError("cf2if must be a matrix")
        r = cf2if.shape[1]

        rfnodes = np.asarray(rfnodes, float)
        if rfnodes.shape != (r,):
            raise ValueError(f"expecting {r} real-frequency nodes, "
                             f"got shape {rfnodes.shape}")
        ifnodes = _util.check_nodes_2d(ifnodes)
        if ifnodes.shape[0] != r:
            raise ValueError(f"expecting {r} imaginary-frequency nodes, "
                             f"got {ifnodes.shape[0]}")

        self = cls.__new__(cls)
        self._set_state(lambda_, eps, rfnodes, ifnodes, cf2if,
                        (if2cf_lu, if2cf_piv))
        return self

    def _set_state(self, lambda_, eps, rfnodes, ifnodes, cf2if, lu_result):
        lu, piv = lu_result
        self._lambda = _util.check_positive(lambda_, "cutoff lambda")
        if eps is not None:
            eps = _util.check_positive(eps, "tolerance eps")
        self._eps = eps
        self._rfnodes = _readonly(rfnodes)
        self._ifnodes = _readonly(ifnodes)
        self._cf2if = _readonly(cf2if)
        self._if2cf = sampling.LUDecomposedMatrix(
                            self._cf2if, (_readonly(lu), _readonly(piv)))

    def vals2coefs(self, g, axis=0):
        """Transform values on the 2D DLR grid to DLR coefficients.

        Arguments:
            g (array):
                Values of G on the 2D DLR imaginary-frequency nodes, where
                ``g.shape[axis]`` must be the DLR rank ``r``.
            axis (int):
                Dimension of ``g`` indexing the nodes.

        Returns:
            DLR coefficients of G, same shape as ``g``.
        """
        g = _util.check_leading_dim(g, self.size, axis, "values")
        return self._if2cf.solve(g, axis)

    def coefs2vals(self, gc, axis=0):
        """Transform DLR coefficients to values on the 2D DLR grid.

        Arguments:
            gc (array):
                DLR coefficients of G, where ``gc.shape[axis]`` must be the
                DLR rank ``r``.
            axis (int):
                Dimension of ``gc`` indexing the basis functions.

        Returns:
            Values of G on the 2D DLR imaginary-frequency nodes, same shape
            as ``gc``.  The result is always complex.
        """
        gc = _util.check_leading_dim(gc, self.size, axis, "coefficients")
        return self._if2cf.matmul(gc, axis)

    def coefs2eval(self, gc, n, m):
        """Evaluate DLR expansion at Matsubara index pair ``(n, m)``.

        The pair need not be on the 2D DLR grid.  ``n`` and ``m`` may be
        arrays, which are broadcast against each other.

        Arguments:
            gc (array):
                DLR coefficients of G, where ``gc.shape[0]`` is the DLR rank.
            n, m (int or array):
                Fermionic Matsubara indices.

        Returns:
            Values of G, with shape ``broadcast(n, m).shape + gc.shape[1:]``.
            For scalar ``n``, ``m`` and a vector of coefficients, a complex
            scalar.
        """
        gc = _util.check_leading_dim(gc, self.size, 0, "coefficients")
        n, m = np.broadcast_arrays(_util.check_matsubara_index(n),
                                   _util.check_matsubara_index(m))

        phi = _kernel.matsubara_kernel_2d(
                    n.ravel()[:, None], m.ravel()[:, None],
                    self._rfnodes[None, :])
        res = phi @ gc.reshape(self.size, int(np.prod(gc.shape[1:])))
        return res.reshape(n.shape + gc.shape[1:])[()]

    def rank(self):
        """DLR rank, i.e., number of basis functions and grid nodes"""
        return self._cf2if.shape[1]

    @property
    def size(self):
        """Number of basis functions (same as ``rank()``)"""
        return self.rank()

    @property
    def lambda_(self):
        """Dimensionless cutoff ``beta * wmax``"""
        return self._lambda

    @property
    def eps(self):
        """Error tolerance (or ``None`` if not known)"""
        return self._eps

    @property
    def cond(self):
        """Condition number of the transformation between values and coefs"""
        return self._if2cf.cond

    def get_rfnodes(self, i=None):
        """DLR real-frequency nodes (or the ``i``-th node)"""
        if i is None:
            return self._rfnodes
        return float(self._rfnodes[i])

    def get_ifnodes(self, i=None):
        """2D DLR imaginary-frequency nodes (or the ``i``-th pair)

        The nodes are returned as integer array of shape ``(r, 2)``, where
        each row is a pair ``(n, m)`` of Matsubara indices.
        """
        if i is None:
            return self._ifnodes
        n, m = self._ifnodes[i]
        return int(n), int(m)

    def get_cf2if(self):
        """Transformation matrix from DLR coefficients to values on grid"""
        return self._cf2if

    def get_if2cf_lu(self):
        """LU factors of the transformation from values to coefficients"""
        return self._if2cf.lu

    def get_if2cf_piv(self):
        """LU pivots of the transformation from values to coefficients"""
        return self._if2cf.piv

    def serialize(self, ar):
        """Write all members to archive ``ar`` in a fixed order.

        ``ar`` must provide ``ar.write(name, value)``; see
        :class:`serialize.AbstractArchive`.  The tolerance is not written.
        LU pivots are written 1-based, following the LAPACK convention.
        """
        ar.write("lambda", self._lambda)
        ar.write("rank", self.rank())
        ar.write("rf", self._rfnodes)
        ar.write("if", self._ifnodes)
        ar.write("cf2if", self._cf2if)
        ar.write("if2cf_lu", self._if2cf.lu)
        ar.write("if2cf_piv", self._if2cf.piv + 1)

    @classmethod
    def deserialize(cls, ar):
        """Read instance from archive ``ar`` in the order of serialize()"""
        lambda_ = ar.read("lambda")
        r = int(ar.read("rank"))
        rfnodes = ar.read("rf")
        ifnodes = ar.read("if")
        cf2if = ar.read("cf2if")
        if2cf_lu = ar.read("if2cf_lu")
        if2cf_piv = np.asarray(ar.read("if2cf_piv")) - 1

        self = cls.restore_from(lambda_, None, rfnodes, ifnodes, cf2if,
                                if2cf_lu, if2cf_piv)
        if self.rank() != r:
            raise ValueError(f"stored rank {r} does not match the "
                             f"transformation matrix of rank {self.rank()}")
        return self

    def __repr__(self):
        return (f"{type(self).__name__}(lambda_={self._lambda!r}, "
                f"eps={self._eps!r}, rank={self.rank()})")


imfreq_ops_2d = ImfreqOps2D


def _readonly(x):
    x = np.array(x)
    x.flags.writeable = False
    return x
