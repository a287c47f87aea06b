# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
"""Storage of precomputed 2D DLR operations.

Two mechanisms are provided:

 1. An archive interface, :class:`AbstractArchive`, with which
    :meth:`ImfreqOps2D.serialize` and :meth:`ImfreqOps2D.deserialize` visit
    all members in a fixed order.

 2. An HDF5 layout written by :func:`h5_write` and read by :func:`h5_read`,
    which stores the operations as a tagged group::

        <name>/                 attribute Format = "dlr2d::imfreq_ops_2d"
            lambda              cutoff (scalar)
            eps                 tolerance (scalar)
            rf                  real-frequency nodes, (r,)
            if                  imaginary-frequency index pairs, (r, 2)
            cf2if               coefficients to values matrix, (r, r)
            if2cf_lu            LU factors of cf2if, (r, r)
            if2cf_piv           LU pivots (1-based, as LAPACK), (r,)

Pivots are held 0-based in memory, as returned by scipy, and converted on
write and read.  The layout is specific to this package: it is not
interchangeable with the files written by the C++ cppdlr library, which
use a different format tag and set of datasets.
"""
import h5py
import numpy as np

from . import imfreq

FORMAT = "dlr2d::imfreq_ops_2d"


class AbstractArchive:
    """Archive of named fields.

    An archive must be able to store a value (scalar or array) under a
    name, and to retrieve it by that name.  Objects write their fields in a
    fixed order and read them back in the same order.
    """
    def write(self, name, value):
        """Store ``value`` under ``name``"""
        raise NotImplementedError()

    def read(self, name):
        """Retrieve value stored under ``name``"""
        raise NotImplementedError()


class DictArchive(AbstractArchive):
    """In-memory archive, which records the order of the fields.

    Reading must proceed in the same order as writing, otherwise a
    ``KeyError`` is raised.
    """
    def __init__(self):
        self._data = {}
        self._names = []
        self._cursor = 0

    def write(self, name, value):
        if name in self._data:
            raise KeyError(f"field {name!r} already written")
        self._data[name] = np.array(value)
        self._names.append(name)

    def read(self, name):
        if self._cursor >= len(self._names):
            raise KeyError(f"no more fields, trying to read {name!r}")
        expected = self._names[self._cursor]
        if name != expected:
            raise KeyError(f"expecting field {expected!r}, got {name!r}")
        self._cursor += 1
        return self._data[name]

    def rewind(self):
        """Restart reading from the first field"""
        self._cursor = 0

    @property
    def names(self):
        """Names of fields in the order they were written"""
        return tuple(self._names)


class HDF5Archive(AbstractArchive):
    """Archive of datasets in an HDF5 group (an ``h5py.Group``)"""
    def __init__(self, group):
        self._group = group

    def write(self, name, value):
        self._group.create_dataset(name, data=np.asarray(value))

    def read(self, name):
        return self._group[name][()]

    @property
    def group(self):
        return self._group


def h5_write(parent, name, ops):
    """Write 2D DLR operations as subgroup ``name`` of ``parent``.

    Arguments:
        parent (h5py.Group):
            Group or file in which to create the subgroup.
        name (str):
            Name of the subgroup, which must not exist yet.
        ops (ImfreqOps2D):
            Operations to store.
    """
    group = parent.create_group(name)
    group.attrs["Format"] = FORMAT

    ar = HDF5Archive(group)
    ar.write("lambda", ops.lambda_)
    ar.write("eps", np.nan if ops.eps is None else ops.eps)
    ar.write("rf", ops.get_rfnodes())
    ar.write("if", ops.get_ifnodes())
    ar.write("cf2if", ops.get_cf2if())
    ar.write("if2cf_lu", ops.get_if2cf_lu())
    ar.write("if2cf_piv", ops.get_if2cf_piv() + 1)


def h5_read(parent, name):
    """Read 2D DLR operations from subgroup ``name`` of ``parent``.

    ``parent`` is an ``h5py.Group`` or file.  Returns an instance of
    :class:`ImfreqOps2D`.
    """
    group = parent[name]
    check_format(group)

    ar = HDF5Archive(group)
    lambda_ = ar.read("lambda")
    eps = ar.read("eps")
    rfnodes = ar.read("rf")
    ifnodes = ar.read("if")
    cf2if = ar.read("cf2if")
    if2cf_lu = ar.read("if2cf_lu")
    if2cf_piv = ar.read("if2cf_piv") - 1

    eps = None if np.isnan(eps) else eps
    return imfreq.ImfreqOps2D.restore_from(
                lambda_, eps, rfnodes, ifnodes, cf2if, if2cf_lu, if2cf_piv)


def check_format(group):
    """Checks that HDF5 group is tagged as 2D DLR operations"""
    fmt = group.attrs.get("Format")
    if isinstance(fmt, bytes):
        fmt = fmt.decode()
    if fmt is None:
        raise ValueError(f"HDF5 group {group.name} has no format tag")
    if fmt != FORMAT:
        raise ValueError(f"HDF5 group {group.name} has format {fmt!r}, "
                         f"expecting {FORMAT!r}")


def save(filename, ops, name="ifops"):
    """Save 2D DLR operations to a new HDF5 file"""
    with h5py.File(filename, "w") as f:
        h5_write(f, name, ops)


def load(filename, name="ifops"):
    """Load 2D DLR operations from HDF5 file"""
    with h5py.File(filename, "r") as f:
        return h5_read(f, name)
