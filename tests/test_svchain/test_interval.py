import pytest

from svchain.interval import Interval


class TestInterval:
    def test___init__error(self):
        with pytest.raises(AttributeError):
            Interval(4, 3)

    def test_eq(self):
        assert Interval(1, 2) == Interval(1, 2)
        assert Interval(1, 2) != Interval(1, 3)
        assert Interval(5) == Interval(5, 5)

    def test___get_item__(self):
        temp = Interval(1, 2)
        assert temp[0] == 1
        assert temp[1] == 2
        with pytest.raises(IndexError):
            temp[3]
        with pytest.raises(IndexError):
            temp['1b']

    def test_overlaps(self):
        left = Interval(-4, 1)
        middle = Interval(0, 10)
        right = Interval(6, 12)
        assert not Interval.overlaps(left, right)
        assert not Interval.overlaps(right, left)
        assert Interval.overlaps(left, middle)
        assert Interval.overlaps(right, middle)
        assert Interval.overlaps(middle, left)
        assert Interval.overlaps(middle, right)
        assert Interval.overlaps((1, 2), (2, 5))

    def test_strictly_contains(self):
        assert Interval(1, 10).strictly_contains(Interval(2, 9))
        assert not Interval(1, 10).strictly_contains(Interval(1, 9))
        assert not Interval(1, 10).strictly_contains(Interval(2, 10))
