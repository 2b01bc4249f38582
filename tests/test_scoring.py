import unittest

from shapeville.policy.scoring import ScoringFamily, ScoringPolicy, ScoringTable, points_for


class ScoringTests(unittest.TestCase):
    def test_standard_table(self) -> None:
        got = [points_for(n, ScoringFamily.STANDARD) for n in range(1, 6)]
        self.assertEqual(got, [3, 2, 1, 0, 0])

    def test_high_value_table_has_sticky_tail(self) -> None:
        got = [points_for(n, ScoringFamily.HIGH_VALUE) for n in range(1, 6)]
        self.assertEqual(got, [6, 4, 2, 2, 2])

    def test_zero_attempts_scores_nothing(self) -> None:
        self.assertEqual(points_for(0, ScoringFamily.HIGH_VALUE), 0)

    def test_family_accepts_string_value(self) -> None:
        self.assertEqual(points_for(1, "high_value"), 6)

    def test_tables_must_be_non_increasing(self) -> None:
        with self.assertRaises(ValueError):
            ScoringTable(points=(1, 2, 3))
        with self.assertRaises(ValueError):
            ScoringTable(points=())
        with self.assertRaises(ValueError):
            ScoringTable(points=(3, -1))

    def test_policy_from_config(self) -> None:
        cfg = {"scoring": {"tables": {"standard": {"points": [5, 3], "sticky_tail": False}}}}
        policy = ScoringPolicy.from_config(cfg)
        self.assertEqual(policy.points_for(2, ScoringFamily.STANDARD), 3)
        self.assertEqual(policy.points_for(3, ScoringFamily.STANDARD), 0)
        self.assertEqual(policy.max_points(ScoringFamily.STANDARD), 5)
        # Families missing from config keep their defaults.
        self.assertEqual(policy.points_for(4, ScoringFamily.HIGH_VALUE), 2)


if __name__ == "__main__":
    unittest.main()
