import pytest

from opskit.conv import to_int64


@pytest.mark.parametrize("value", [0, 5, -7, 2**63 - 1, -(2**63)])
def test_in_range_values_unchanged(value):
    assert to_int64(value) == value


def test_large_unsigned_wraps():
    assert to_int64(2**64 - 1) == -1
    assert to_int64(2**63) == -(2**63)


@pytest.mark.parametrize("value", [1.5, "3", None, True, [1]])
def test_non_integers_rejected(value):
    with pytest.raises(TypeError):
        to_int64(value)