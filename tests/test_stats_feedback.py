import json
import os
import tempfile
import unittest

from shapeville.app.feedback import attempts_remaining_text, grade, solved_text
from shapeville.stats.stats import format_summary, new_play_stats, update_stats, write_stats


class StatsTests(unittest.TestCase):
    def test_update_and_summary(self) -> None:
        stats = new_play_stats()
        update_stats(stats, "area", "correctly_solved", 2, 2)
        update_stats(stats, "area", "timed_out", 0, 1)
        update_stats(stats, "circle", "exhausted_attempts", 0, 3)

        self.assertEqual(stats["score"], 2)
        self.assertEqual((stats["solved"], stats["questions"]), (1, 3))
        area = stats["per_module"]["area"]
        self.assertEqual((area["asked"], area["solved"], area["timed_out"], area["attempts"]), (2, 1, 1, 3))
        self.assertEqual(stats["per_module"]["circle"]["exhausted"], 1)

        text = format_summary(stats, {"ks1": 0.0, "ks2": 12.5})
        self.assertIn("Score: 2", text)
        self.assertIn("area: 1/2 solved, 2 points", text)
        self.assertIn("KS2 progress: 12.5%", text)

    def test_write_stats(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out", "stats.json")
            write_stats(new_play_stats(), path)
            with open(path, encoding="utf-8") as f:
                self.assertEqual(json.load(f)["questions"], 0)


class FeedbackTests(unittest.TestCase):
    def test_attempts_text(self) -> None:
        self.assertEqual(attempts_remaining_text(1), "Incorrect. You have 1 more attempt remaining.")
        self.assertEqual(attempts_remaining_text(2), "Incorrect. You have 2 more attempts remaining.")

    def test_solved_text(self) -> None:
        self.assertEqual(solved_text(1, 6), "Excellent! +6 points")
        self.assertEqual(solved_text(4, 2), "Correct! +2 points")

    def test_grade_thresholds(self) -> None:
        self.assertIn("master", grade(11, 12)[1])
        self.assertIn("Great job", grade(9, 12)[1])
        self.assertIn("Well done", grade(6, 12)[1])
        self.assertIn("Good start", grade(4, 12)[1])
        self.assertIn("Keep studying", grade(1, 12)[1])
        self.assertIn("Keep studying", grade(0, 0)[1])


if __name__ == "__main__":
    unittest.main()
