import itertools

import pytest

from pillarlog.core.errors import InvalidInput
from pillarlog.services.pairs import canonical_pair


@pytest.mark.parametrize("a,b", [(1, 2), (2, 1), (7, 300), (300, 7)])
def test_canonical_pair_orders_low_high(a, b):
    low, high = canonical_pair(a, b)
    assert low < high
    assert {low, high} == {a, b}


def test_canonical_pair_is_commutative():
    for a, b in itertools.permutations(range(1, 6), 2):
        assert canonical_pair(a, b) == canonical_pair(b, a)


def test_self_pairing_is_rejected():
    with pytest.raises(InvalidInput):
        canonical_pair(4, 4)
