import unittest

from shapeville.core.session import ExerciseSession, Outcome, SessionState
from shapeville.policy.scoring import ScoringFamily


class ExerciseSessionTests(unittest.TestCase):
    def _session(self, family: ScoringFamily = ScoringFamily.STANDARD, deltas=None) -> ExerciseSession:
        cb = deltas.append if deltas is not None else None
        return ExerciseSession("area:rectangle", family=family, on_score_delta=cb)

    def test_not_started_rejects_submissions(self) -> None:
        s = self._session()
        self.assertEqual(s.state, SessionState.NOT_STARTED)
        res = s.submit_answer("50")
        self.assertEqual(res.outcome, Outcome.INVALID)
        self.assertEqual(s.attempts_used, 0)

    def test_second_attempt_standard_scenario(self) -> None:
        deltas: list[int] = []
        s = self._session(deltas=deltas)
        s.start(50.0, tolerance=0.01, max_attempts=3)

        first = s.submit_answer(49.0)
        self.assertEqual(first.outcome, Outcome.INCORRECT)
        self.assertEqual(first.attempts_remaining, 2)
        self.assertEqual(first.state, SessionState.ACTIVE)

        second = s.submit_answer(50.005)
        self.assertEqual(second.outcome, Outcome.CORRECT)
        self.assertEqual(second.state, SessionState.CORRECTLY_SOLVED)
        self.assertEqual(s.points, 2)
        self.assertEqual(deltas, [2])
        self.assertTrue(s.is_complete)

    def test_invalid_text_consumes_no_attempt(self) -> None:
        s = self._session()
        s.start(50.0)
        res = s.submit_answer("abc")
        self.assertEqual(res.outcome, Outcome.INVALID)
        self.assertEqual(res.attempts_remaining, 3)
        self.assertEqual(s.attempts_used, 0)
        self.assertEqual(s.state, SessionState.ACTIVE)

    def test_exhausting_attempts(self) -> None:
        deltas: list[int] = []
        s = self._session(deltas=deltas)
        s.start(10.0, max_attempts=3)
        for _ in range(3):
            res = s.submit_answer(1)
        self.assertEqual(res.state, SessionState.EXHAUSTED_ATTEMPTS)
        self.assertEqual(res.attempts_remaining, 0)
        self.assertEqual(s.points, 0)
        self.assertEqual(deltas, [])

        # Terminal: nothing changes any more.
        after = s.submit_answer(10.0)
        self.assertEqual(after.outcome, Outcome.INVALID)
        self.assertEqual(s.attempts_used, 3)
        self.assertEqual(s.state, SessionState.EXHAUSTED_ATTEMPTS)

    def test_timeout_freezes_session(self) -> None:
        s = self._session()
        s.start(10.0, time_budget_seconds=2)
        t1 = s.tick()
        self.assertEqual((t1.seconds_left, t1.expired), (1, False))
        t2 = s.tick()
        self.assertEqual((t2.seconds_left, t2.expired), (0, True))
        self.assertEqual(s.state, SessionState.TIMED_OUT)
        self.assertEqual(s.points, 0)

        t3 = s.tick()
        self.assertEqual(t3.seconds_left, 0)
        self.assertEqual(s.submit_answer(10.0).outcome, Outcome.INVALID)
        self.assertEqual(s.attempts_used, 0)

    def test_ticks_after_solve_do_not_change_time(self) -> None:
        s = self._session()
        s.start(4.0, time_budget_seconds=5)
        s.tick()
        s.submit_answer(4)
        s.tick()
        self.assertEqual(s.remaining_seconds, 4)
        self.assertEqual(s.state, SessionState.CORRECTLY_SOLVED)

    def test_untimed_session_never_expires(self) -> None:
        s = self._session()
        s.start("hexagon")
        for _ in range(500):
            res = s.tick()
        self.assertIsNone(res.seconds_left)
        self.assertFalse(res.expired)
        self.assertTrue(s.is_active)

    def test_high_value_third_attempt_still_scores(self) -> None:
        s = self._session(family=ScoringFamily.HIGH_VALUE)
        s.start(31.41593, tolerance=0.01)
        s.submit_answer(30)
        s.submit_answer(32)
        s.submit_answer("31.415")
        self.assertEqual(s.points, 2)

    def test_zero_answer_rejects_near_zero(self) -> None:
        s = self._session(family=ScoringFamily.HIGH_VALUE)
        s.start(0.0, tolerance=1e-9)
        self.assertEqual(s.submit_answer(1e-12).outcome, Outcome.INCORRECT)
        self.assertEqual(s.submit_answer("0").outcome, Outcome.CORRECT)
        self.assertEqual(s.points, 4)

    def test_abandon_makes_session_inert(self) -> None:
        deltas: list[int] = []
        s = self._session(deltas=deltas)
        s.start(5.0, time_budget_seconds=10)
        s.abandon()
        self.assertFalse(s.is_active)
        self.assertEqual(s.submit_answer(5.0).outcome, Outcome.INVALID)
        self.assertEqual(s.tick().seconds_left, 10)
        self.assertEqual(deltas, [])

    def test_bad_limits_raise(self) -> None:
        s = self._session()
        with self.assertRaises(ValueError):
            s.start(1.0, max_attempts=0)
        with self.assertRaises(ValueError):
            s.start(1.0, time_budget_seconds=0)


if __name__ == "__main__":
    unittest.main()
