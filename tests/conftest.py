"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np
import scipy.sparse as sp


def indicator(foreign_keys, n_groups):
    """Dense indicator matrix with a single 1 per row at the foreign key."""
    k = np.zeros((len(foreign_keys), n_groups))
    k[np.arange(len(foreign_keys)), foreign_keys] = 1.0
    return k


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def factors(rng):
    """
    Two-term factorization over 12 rows.

    S is 12x3, K_0 maps into 4 groups with R_0 4x2, K_1 maps into 3
    groups with R_1 3x3. Every group is referenced at least once.
    """
    n = 12
    fk0 = np.concatenate([np.arange(4), rng.integers(0, 4, size=n - 4)])
    fk1 = np.concatenate([np.arange(3), rng.integers(0, 3, size=n - 3)])
    base = rng.standard_normal((n, 3))
    left = [indicator(fk0, 4), indicator(fk1, 3)]
    right = [rng.standard_normal((4, 2)), rng.standard_normal((3, 3))]
    return base, left, right


@pytest.fixture
def positive_factors(factors):
    """Same layout with strictly positive values (for log/sqrt/powers)."""
    base, left, right = factors
    return np.abs(base) + 0.5, left, [np.abs(r) + 0.5 for r in right]


@pytest.fixture
def sparse_factors(factors):
    """Same factorization with K_i as CSR matrices."""
    base, left, right = factors
    return base, [sp.csr_matrix(k) for k in left], right


def dense_aggregate(base, left, right, base_absent=False):
    """Reference [S | K_0 R_0 | ...] formed directly with NumPy."""
    blocks = [] if base_absent else [np.asarray(base)]
    for k, r in zip(left, right):
        k = k.toarray() if sp.issparse(k) else np.asarray(k)
        blocks.append(k @ r)
    return np.hstack(blocks)


@pytest.fixture
def aggregate_of():
    """The dense_aggregate helper, for tests that need a reference matrix."""
    return dense_aggregate
