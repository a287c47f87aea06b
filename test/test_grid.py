# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
import numpy as np
import pytest

import dlr2d


def _check_nodes(nodes, r):
    assert nodes.shape == (r, 2)
    assert np.issubdtype(nodes.dtype, np.integer)

    # distinct and sorted lexicographically
    as_tuples = [tuple(pair) for pair in nodes]
    assert len(set(as_tuples)) == r
    assert as_tuples == sorted(as_tuples)


def test_reduced(rfnodes):
    w = rfnodes[1e-5]
    nodes = dlr2d.build_dlr2d_if(10, 1e-5, rfnodes=w)
    _check_nodes(nodes, w.size)

    # Pairs are built from the 1D DLR nodes
    nodes_1d = dlr2d.build_dlr_if(10, w)
    assert np.isin(nodes, nodes_1d).all()


def test_dense(rfnodes):
    w = rfnodes[1e-5]
    nodes = dlr2d.build_dlr2d_if(10, 1e-5, rfnodes=w, reduced=False,
                                 niom_dense=25)
    _check_nodes(nodes, w.size)
    assert (nodes >= -25).all() and (nodes < 25).all()


def test_dense_too_small(rfnodes):
    w = rfnodes[1e-5]
    with pytest.raises(ValueError):
        dlr2d.build_dlr2d_if(10, 1e-5, rfnodes=w, reduced=False,
                             niom_dense=1)


def test_deterministic(rfnodes):
    nodes1 = dlr2d.build_dlr2d_if(10, 1e-5)
    nodes2 = dlr2d.build_dlr2d_if(10, 1e-5, rfnodes=rfnodes[1e-5])
    np.testing.assert_array_equal(nodes1, nodes2)


def test_rank_matches_1d(rfnodes):
    for eps, w in rfnodes.items():
        nodes = dlr2d.build_dlr2d_if(10, eps, rfnodes=w)
        assert nodes.shape[0] == w.size


@pytest.mark.parametrize("lambda_, eps", [(0, 1e-5), (10, -1)])
def test_invalid(lambda_, eps):
    with pytest.raises(ValueError):
        dlr2d.build_dlr2d_if(lambda_, eps)
