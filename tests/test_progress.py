import unittest
from fractions import Fraction

from shapeville.progress.registry import CompletionRegistry
from shapeville.progress.tracker import ProgressTracker, Stage


class CompletionRegistryTests(unittest.TestCase):
    def test_mark_completed_is_idempotent_and_notifies_once(self) -> None:
        seen = []
        reg = CompletionRegistry("area", ["rectangle", "triangle"], on_first_completion=lambda k, r: seen.append(k))

        first = reg.mark_completed("rectangle", 2, 2)
        self.assertFalse(first.already_completed_before)
        second = reg.mark_completed("rectangle", 1, 3)
        self.assertTrue(second.already_completed_before)

        self.assertEqual(seen, ["rectangle"])
        rec = reg.get("rectangle")
        self.assertEqual((rec.attempts_taken, rec.points_earned), (2, 2))

    def test_all_completed_and_uncompleted(self) -> None:
        reg = CompletionRegistry("circle", ["area", "circumference"])
        self.assertFalse(reg.all_completed())
        reg.mark_completed("area", 1, 6)
        self.assertEqual(reg.uncompleted(), ["circumference"])
        self.assertTrue(reg.all_completed(["area"]))
        reg.mark_completed("circumference", 3, 2)
        self.assertTrue(reg.all_completed())
        self.assertEqual(reg.total_points(), 8)
        self.assertFalse(reg.all_completed([]))

    def test_reset_all_clears_only_this_registry(self) -> None:
        a = CompletionRegistry("shapes_2d", ["circle", "square"])
        b = CompletionRegistry("shapes_3d", ["cube"])
        a.mark_completed("circle", 1, 3)
        b.mark_completed("cube", 1, 6)
        a.reset_all()
        self.assertFalse(a.is_completed("circle"))
        self.assertEqual(a.snapshot()["circle"], {"completed": False, "attempts_taken": 0, "points_earned": 0})
        self.assertTrue(b.is_completed("cube"))

    def test_unknown_key_is_added_on_mark(self) -> None:
        reg = CompletionRegistry("sector")
        reg.mark_completed(3, 1, 6)
        self.assertTrue(reg.is_completed("3"))
        self.assertEqual(reg.keys, ["3"])


class ProgressTrackerTests(unittest.TestCase):
    def test_stage_totals(self) -> None:
        t = ProgressTracker()
        self.assertEqual(t.stage_total(Stage.KS1), 50.0)
        self.assertEqual(t.stage_total(Stage.KS2), 25.0)

    def test_increment_and_rounding(self) -> None:
        t = ProgressTracker()
        for i in range(6):
            t.add_task_completion(Stage.KS2, Fraction(1, 6), key=f"compound_area:{i}")
        self.assertAlmostEqual(t.raw_percent(Stage.KS2), 25.0, places=4)
        self.assertEqual(t.current_percent(Stage.KS2), 25.0)
        self.assertEqual(t.raw_percent(Stage.KS1), 0.0)

    def test_key_is_counted_once(self) -> None:
        t = ProgressTracker()
        self.assertTrue(t.add_task_completion(Stage.KS1, Fraction(1, 5), key="angle_types:acute angle"))
        self.assertFalse(t.add_task_completion(Stage.KS1, Fraction(1, 5), key="angle_types:acute angle"))
        self.assertEqual(t.raw_percent(Stage.KS1), 10.0)
        self.assertTrue(t.is_counted("angle_types:acute angle"))

    def test_clamped_at_100(self) -> None:
        t = ProgressTracker()
        for _ in range(5):
            t.add_task_completion(Stage.KS1, 1)
        self.assertEqual(t.current_percent(Stage.KS1), 100.0)

    def test_negative_weight_raises(self) -> None:
        with self.assertRaises(ValueError):
            ProgressTracker().add_task_completion(Stage.KS1, -0.5)

    def test_listener_receives_display_percent(self) -> None:
        seen = []
        t = ProgressTracker()
        t.subscribe(lambda stage, pct: seen.append((stage, pct)))
        t.add_task_completion("ks2", Fraction(1, 8))
        self.assertEqual(seen, [(Stage.KS2, 3.1)])

    def test_custom_stage_totals(self) -> None:
        t = ProgressTracker(stage_totals={"ks2": 40.0})
        t.add_task_completion(Stage.KS2, 0.5)
        self.assertEqual(t.current_percent(Stage.KS2), 20.0)


if __name__ == "__main__":
    unittest.main()
