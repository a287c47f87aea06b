# Copyright (C) 2023-2024 The dlr2d authors
# SPDX-License-Identifier: MIT
#
# This file is available from EVERY test in the directory.  This is why
# we use it to compute the operations ONCE.
import pytest
import dlr2d


@pytest.fixture(scope="package")
def ifops():
    """2D DLR operations for lambda = 10 and various tolerances"""
    print("Precomputing 2D DLR operations ...")
    return {
        1e-5: dlr2d.ImfreqOps2D(10, 1e-5),
        1e-7: dlr2d.ImfreqOps2D(10, 1e-7),
        }


@pytest.fixture(scope="package")
def rfnodes():
    """DLR real-frequency nodes for lambda = 10 and various tolerances"""
    return {
        1e-5: dlr2d.build_dlr_rf(10, 1e-5),
        1e-7: dlr2d.build_dlr_rf(10, 1e-7),
        }


@pytest.fixture(scope="package")
def ifops_large():
    """2D DLR operations for lambda = 100"""
    return dlr2d.ImfreqOps2D(100, 1e-7)
