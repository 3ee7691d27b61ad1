import unittest
from datetime import datetime, timedelta, timezone

from core.utils import as_utc, clamp, round_half_up


class TestRoundHalfUp(unittest.TestCase):

    def test_true_tie_rounds_away_from_zero(self):
        self.assertEqual(round_half_up(0.125, 2), 0.13)
        self.assertEqual(round_half_up(2.5, 0), 3.0)

    def test_binary_representation_is_respected(self):
        # 2.675 is stored as 2.67499999...
        self.assertEqual(round_half_up(2.675, 2), 2.67)

    def test_four_places(self):
        self.assertEqual(round_half_up(1 / 3, 4), 0.3333)
        self.assertEqual(round_half_up(2 / 3, 4), 0.6667)


class TestClamp(unittest.TestCase):

    def test_clamp(self):
        self.assertEqual(clamp(-1.0, 0.0, 5.0), 0.0)
        self.assertEqual(clamp(6.0, 0.0, 5.0), 5.0)
        self.assertEqual(clamp(3.2, 0.0, 5.0), 3.2)


class TestAsUtc(unittest.TestCase):

    def test_naive_treated_as_utc(self):
        naive = datetime(2025, 1, 1, 8, 0)
        self.assertEqual(as_utc(naive), datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc))

    def test_aware_converted(self):
        plus_two = timezone(timedelta(hours=2))
        moment = datetime(2025, 1, 1, 10, 0, tzinfo=plus_two)
        self.assertEqual(as_utc(moment), datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc))
        self.assertEqual(as_utc(moment).tzinfo, timezone.utc)


if __name__ == '__main__':
    unittest.main()
