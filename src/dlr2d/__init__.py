"""
Two-dimensional discrete Lehmann representation (DLR) in Matsubara frequency
=============================================================================

This library provides routines for expanding two-particle correlation
functions ``G(n, m)``, given on a pair of Matsubara frequency indices, in a
compact two-dimensional DLR basis.  It provides:

 - selection of a sparse grid of ``r`` Matsubara index pairs
 - cached transformations between values on that grid and coefficients
 - evaluation of the expansion at arbitrary index pairs
 - storage of the precomputed operators in HDF5 files
"""
__copyright__ = "2023-2024 The dlr2d authors"
__license__ = "MIT"
__version__ = "0.2.0"

from .kernel import matsubara_kernel, matsubara_kernel_2d
from .dlr import build_dlr_rf, build_dlr_if
from .grid import build_dlr2d_if
from .sampling import build_cf2if, LUDecomposedMatrix, \
    ConditioningWarning, SingularMatrixError
from .imfreq import ImfreqOps2D, imfreq_ops_2d
from .serialize import h5_write, h5_read, save, load
