# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
import numpy as np

from . import _util


def matsubara_frequency(n, statistics='F'):
    """Return Matsubara frequency for index ``n`` at unit temperature.

    For fermions, this is ``(2*n + 1) * pi``, for bosons ``2 * n * pi``.
    """
    n = _util.check_matsubara_index(n)
    _util.check_statistics(statistics)
    zeta = 1 if statistics == 'F' else 0
    return (2 * n + zeta) * np.pi


def matsubara_kernel(n, omega, statistics='F'):
    """Analytic continuation kernel from real to Matsubara frequency.

    Evaluates the kernel of the discrete Lehmann representation,
    continued to the imaginary-frequency axis::

        K_F(n, w) = 1 / (i nu_n - w)
        K_B(n, w) = tanh(w/2) / (i nu_n - w)

    where ``nu_n`` is given by :func:`matsubara_frequency`.  The arguments
    are broadcast against each other.  The bosonic kernel has a removable
    singularity at ``n == 0, w == 0``, where it is continued to ``-1/2``.

    Only a division is performed, so the kernel is stable for arbitrarily
    large indices and frequencies.
    """
    iv = 1j * matsubara_frequency(n, statistics)
    omega = np.asarray(omega, dtype=float)
    if statistics == 'F':
        return 1 / (iv - omega)

    with np.errstate(invalid='ignore', divide='ignore'):
        res = np.tanh(0.5 * omega) / (iv - omega)
    return np.where((iv == 0) & (omega == 0), -0.5, res)


def matsubara_kernel_2d(n, m, omega, statistics='F'):
    """Two-dimensional DLR basis function for a pair of Matsubara indices.

    The basis function for a real frequency ``w`` is the product of two
    one-dimensional kernels::

        phi(n, m, w) = K(n, w) * K(m, w)

    For ``n != m`` and fermions, this is the divided difference
    ``(K(n, w) - K(m, w)) / (i nu_m - i nu_n)``.  As a consequence, the
    real-frequency nodes which interpolate ``K`` also interpolate ``phi``
    to the same accuracy.  Arguments are broadcast against each other.
    """
    return (matsubara_kernel(n, omega, statistics) *
            matsubara_kernel(m, omega, statistics))
