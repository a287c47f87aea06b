# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
import h5py
import numpy as np
import pytest

import dlr2d
from dlr2d import serialize


def _assert_same(ops, ops_ref):
    assert ops.lambda_ == ops_ref.lambda_
    assert ops.rank() == ops_ref.rank()
    np.testing.assert_array_equal(ops.get_rfnodes(), ops_ref.get_rfnodes())
    np.testing.assert_array_equal(ops.get_ifnodes(), ops_ref.get_ifnodes())
    np.testing.assert_array_equal(ops.get_cf2if(), ops_ref.get_cf2if())
    np.testing.assert_array_equal(ops.get_if2cf_lu(), ops_ref.get_if2cf_lu())
    np.testing.assert_array_equal(ops.get_if2cf_piv(),
                                  ops_ref.get_if2cf_piv())


def test_h5_rw(tmp_path):
    # Build from scratch, write to file, read back
    ifops = dlr2d.imfreq_ops_2d(10, 1e-5)
    filename = tmp_path / "data_imfreq_ops_h5_rw.h5"
    with h5py.File(filename, "w") as f:
        dlr2d.h5_write(f, "ifops", ifops)

    with h5py.File(filename, "r") as f:
        ifops_ref = dlr2d.h5_read(f, "ifops")

    _assert_same(ifops, ifops_ref)
    assert ifops_ref.eps == ifops.eps


def test_save_load(ifops, tmp_path):
    ops = ifops[1e-5]
    filename = tmp_path / "ifops.h5"
    dlr2d.save(filename, ops)
    ops_ref = dlr2d.load(filename)
    _assert_same(ops, ops_ref)

    with h5py.File(filename, "r") as f:
        group = f["ifops"]
        assert group.attrs["Format"] == serialize.FORMAT
        assert group["if"].shape == (ops.rank(), 2)
        assert np.issubdtype(group["if"].dtype, np.integer)
        assert np.issubdtype(group["if2cf_piv"].dtype, np.integer)
        np.testing.assert_array_equal(group["if2cf_piv"][()],
                                      ops.get_if2cf_piv() + 1)
        assert set(group.keys()) == {"lambda", "eps", "rf", "if", "cf2if",
                                     "if2cf_lu", "if2cf_piv"}


def test_format_mismatch(ifops, tmp_path):
    ops = ifops[1e-5]
    filename = tmp_path / "bad.h5"
    with h5py.File(filename, "w") as f:
        dlr2d.h5_write(f, "wrong", ops)
        f["wrong"].attrs["Format"] = "cppdlr::imtime_ops"
        dlr2d.h5_write(f, "missing", ops)
        del f["missing"].attrs["Format"]

    with h5py.File(filename, "r") as f:
        with pytest.raises(ValueError, match="format"):
            dlr2d.h5_read(f, "wrong")
        with pytest.raises(ValueError, match="format tag"):
            dlr2d.h5_read(f, "missing")


def test_archive_order(ifops):
    ops = ifops[1e-5]
    ar = serialize.DictArchive()
    ops.serialize(ar)
    assert ar.names == ("lambda", "rank", "rf", "if", "cf2if",
                        "if2cf_lu", "if2cf_piv")

    ops_ref = dlr2d.ImfreqOps2D.deserialize(ar)
    _assert_same(ops, ops_ref)
    assert ops_ref.eps is None

    # Reading again without rewinding runs past the end
    with pytest.raises(KeyError):
        dlr2d.ImfreqOps2D.deserialize(ar)
    ar.rewind()
    _assert_same(ops, dlr2d.ImfreqOps2D.deserialize(ar))


def test_archive_out_of_order():
    ar = serialize.DictArchive()
    ar.write("lambda", 10.0)
    ar.write("rank", 3)
    with pytest.raises(KeyError):
        ar.read("rank")
    with pytest.raises(KeyError):
        ar.write("lambda", 11.0)


def test_archive_rank_mismatch(ifops):
    ops = ifops[1e-5]
    ar = serialize.DictArchive()
    ar.write("lambda", ops.lambda_)
    ar.write("rank", ops.rank() + 1)
    ar.write("rf", ops.get_rfnodes())
    ar.write("if", ops.get_ifnodes())
    ar.write("cf2if", ops.get_cf2if())
    ar.write("if2cf_lu", ops.get_if2cf_lu())
    ar.write("if2cf_piv", ops.get_if2cf_piv() + 1)
    with pytest.raises(ValueError, match="rank"):
        dlr2d.ImfreqOps2D.deserialize(ar)


def test_hdf5_archive(ifops, tmp_path):
    ops = ifops[1e-5]
    with h5py.File(tmp_path / "archive.h5", "w") as f:
        ops.serialize(serialize.HDF5Archive(f.create_group("ops")))
        piv = f["ops/if2cf_piv"][()]
    assert piv.min() >= 1 and piv.max() <= ops.rank()
    np.testing.assert_array_equal(piv, ops.get_if2cf_piv() + 1)

    with h5py.File(tmp_path / "archive.h5", "r") as f:
        ops_ref = dlr2d.ImfreqOps2D.deserialize(
                        serialize.HDF5Archive(f["ops"]))
    _assert_same(ops, ops_ref)
