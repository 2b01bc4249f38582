import unittest
from fractions import Fraction

from shapeville.app.module_registry import (
    PROGRESS_PER_ROUND,
    PROGRESS_PER_VARIANT,
    get_module,
    list_modules,
    resolve_module,
)
from shapeville.policy.scoring import ScoringFamily
from shapeville.progress.tracker import STAGE_TOTALS, Stage


class ModuleRegistryTests(unittest.TestCase):
    def test_catalog_ids(self) -> None:
        ids = [m.id for m in list_modules()]
        self.assertEqual(
            ids,
            ["shapes_2d", "shapes_3d", "angle_types", "area", "circle", "compound_area", "sector"],
        )

    def test_unknown_module_raises(self) -> None:
        with self.assertRaises(KeyError):
            get_module("pyramids")

    def test_families(self) -> None:
        self.assertEqual(get_module("shapes_2d").family, ScoringFamily.STANDARD)
        self.assertEqual(get_module("area").family, ScoringFamily.STANDARD)
        for mid in ("shapes_3d", "circle", "compound_area", "sector"):
            self.assertEqual(get_module(mid).family, ScoringFamily.HIGH_VALUE, mid)

    def test_full_completion_reaches_100_per_stage(self) -> None:
        reach = {Stage.KS1: Fraction(0), Stage.KS2: Fraction(0)}
        for m in list_modules():
            if m.progress_mode == PROGRESS_PER_VARIANT:
                reach[m.stage] += m.task_weight * len(m.variants)
            elif m.progress_mode == PROGRESS_PER_ROUND:
                reach[m.stage] += m.task_weight
        for stage, share in reach.items():
            self.assertAlmostEqual(float(share) * STAGE_TOTALS[stage], 100.0, msg=stage.value)

    def test_compound_and_sector_parameters(self) -> None:
        compound = get_module("compound_area")
        self.assertEqual(compound.variants, ("2", "3", "4", "5", "8", "9"))
        self.assertEqual(compound.time_budget_seconds, 300)
        self.assertEqual(compound.tolerance, 1e-9)
        self.assertEqual(compound.task_weight, Fraction(1, 6))
        sector = get_module("sector")
        self.assertEqual(sector.time_budget_seconds, 300)
        self.assertEqual(sector.task_weight, Fraction(1, 8))

    def test_progress_keys(self) -> None:
        self.assertEqual(get_module("shapes_3d").progress_key("cube"), "shapes_3d")
        self.assertEqual(get_module("sector").progress_key("4"), "sector:4")
        self.assertEqual(get_module("shapes_2d").questions_per_round, 4)
        self.assertEqual(get_module("area").questions_per_round, 4)

    def test_resolve_applies_overrides(self) -> None:
        cfg = {"modules": {"area": {"tolerance": 0.5, "time_budget_seconds": 0, "max_attempts": 5}}}
        m = resolve_module("area", cfg)
        self.assertEqual(m.tolerance, 0.5)
        self.assertIsNone(m.time_budget_seconds)
        self.assertEqual(m.max_attempts, 5)
        # Untouched modules keep catalog values.
        self.assertEqual(resolve_module("circle", cfg).time_budget_seconds, 180)
        self.assertEqual(resolve_module("circle", None), get_module("circle"))


if __name__ == "__main__":
    unittest.main()
