import unittest
from datetime import date
from decimal import Decimal

from mortgage_planner.engine import EPSILON, MAX_MONTHS, generate_schedule, schedule_truncated
from mortgage_planner.overrides import apply_flat_extra
from mortgage_planner.totals import summarize
from mortgage_planner.utils import MAX_AMOUNT


START = date(2025, 12, 1)


def _default_schedule(overrides=None):
    return generate_schedule(Decimal("315000"), Decimal("3.54"), 360, START, overrides)


class TestScheduleScenarios(unittest.TestCase):
    def test_first_month_of_default_loan(self):
        schedule = _default_schedule()
        first = schedule[0]

        self.assertEqual(first.month_index, 1)
        self.assertEqual(first.due_date, START)
        self.assertEqual(first.planned_interest, Decimal("929.25"))
        self.assertEqual(first.planned_principal, Decimal("875"))
        self.assertEqual(first.planned_payment, Decimal("1804.25"))
        self.assertEqual(first.balance_after, Decimal("314125"))
        self.assertEqual(first.extra_payment, 0)
        self.assertEqual(first.shortfall, 0)
        self.assertFalse(first.overridden)

    def test_base_plan_runs_full_term(self):
        schedule = _default_schedule()

        self.assertEqual(len(schedule), 360)
        self.assertLessEqual(schedule[-1].balance_after, EPSILON)
        self.assertEqual(schedule[-1].due_date, date(2055, 11, 1))

    def test_skipped_first_payment(self):
        base = _default_schedule()
        schedule = _default_schedule({1: Decimal("0")})
        first = schedule[0]

        self.assertEqual(first.actual_payment, 0)
        self.assertEqual(first.interest_paid, 0)
        self.assertEqual(first.principal_paid, 0)
        self.assertEqual(first.balance_after, Decimal("315000"))
        self.assertEqual(first.shortfall, Decimal("1804.25"))
        self.assertEqual(first.extra_payment, 0)
        self.assertTrue(first.overridden)

        self.assertGreaterEqual(len(schedule), len(base))
        self.assertEqual(schedule[1].starting_balance, Decimal("315000"))
        self.assertEqual(schedule[1].planned_principal, Decimal("315000") / Decimal("359"))

    def test_flat_extra_pays_off_early(self):
        base = _default_schedule()
        overrides = apply_flat_extra(base, Decimal("500"))
        schedule = _default_schedule(overrides)

        base_totals = summarize(base)
        totals = summarize(schedule)
        self.assertLess(len(schedule), 360)
        self.assertLess(totals.total_interest, base_totals.total_interest)
        self.assertEqual(schedule[0].extra_payment, Decimal("500"))
        self.assertLessEqual(schedule[-1].balance_after, EPSILON)

    def test_underpayment_extends_past_term(self):
        # 100 a month at zero interest; month 12 only pays half.
        schedule = generate_schedule(Decimal("1200"), Decimal("0"), 12, START, {12: Decimal("50")})

        self.assertEqual(len(schedule), 13)
        self.assertEqual(schedule[11].balance_after, Decimal("50"))
        self.assertEqual(schedule[12].planned_payment, Decimal("50"))
        self.assertEqual(schedule[12].due_date, date(2026, 12, 1))
        self.assertEqual(schedule[12].balance_after, 0)

    def test_overpayment_is_capped_at_balance(self):
        schedule = generate_schedule(Decimal("1200"), Decimal("0"), 12, START, {1: Decimal("5000")})

        self.assertEqual(len(schedule), 1)
        row = schedule[0]
        self.assertEqual(row.actual_payment, Decimal("5000"))
        self.assertEqual(row.principal_paid, Decimal("1200"))
        self.assertEqual(row.extra_payment, Decimal("4900"))
        self.assertEqual(row.balance_after, 0)

    def test_partial_payment_covers_interest_first(self):
        schedule = generate_schedule(Decimal("12000"), Decimal("12"), 12, START, {1: Decimal("60")})
        first = schedule[0]

        self.assertEqual(first.planned_interest, Decimal("120"))
        self.assertEqual(first.interest_paid, Decimal("60"))
        self.assertEqual(first.principal_paid, 0)
        self.assertEqual(first.balance_after, Decimal("12000"))

    def test_planned_principal_relevels_after_missed_month(self):
        schedule = generate_schedule(Decimal("1200"), Decimal("0"), 12, START, {1: Decimal("0")})

        self.assertEqual(schedule[1].planned_principal, Decimal("1200") / Decimal("11"))


class TestDegenerateInputs(unittest.TestCase):
    def test_zero_principal_returns_empty(self):
        self.assertEqual(generate_schedule(Decimal("0"), Decimal("3.54"), 360, START, {1: Decimal("100")}), [])

    def test_negative_principal_returns_empty(self):
        self.assertEqual(generate_schedule(Decimal("-1"), Decimal("3.54"), 360, START), [])

    def test_zero_term_returns_empty(self):
        self.assertEqual(generate_schedule(Decimal("315000"), Decimal("3.54"), 0, START), [])

    def test_non_finite_overrides_are_ignored(self):
        base = _default_schedule()
        schedule = _default_schedule({1: float("nan"), 2: Decimal("Infinity"), 3: None})

        self.assertEqual(schedule, base)

    def test_huge_rate_does_not_overflow(self):
        schedule = generate_schedule(Decimal("315000"), Decimal("1e999999"), 360, START)

        self.assertEqual(len(schedule), 360)
        self.assertTrue(schedule[0].planned_interest.is_finite())
        self.assertEqual(schedule[0].planned_principal, Decimal("875"))

    def test_huge_overrides_are_clamped(self):
        overrides = {1: Decimal("9e999999"), 2: Decimal("9e999999")}
        schedule = generate_schedule(Decimal("315000"), Decimal("3.54"), 360, START, overrides)

        self.assertEqual(len(schedule), 1)
        self.assertEqual(schedule[0].actual_payment, MAX_AMOUNT)
        self.assertEqual(schedule[0].balance_after, 0)
        self.assertTrue(summarize(schedule).total_paid.is_finite())

    def test_hard_cap_truncates_and_warns(self):
        overrides = {month: Decimal("0") for month in range(1, MAX_MONTHS + 100)}
        with self.assertLogs("mortgage_planner.engine", level="WARNING"):
            schedule = generate_schedule(Decimal("1000"), Decimal("5"), 12, START, overrides)

        self.assertEqual(len(schedule), MAX_MONTHS - 1)
        self.assertEqual(schedule[-1].balance_after, Decimal("1000"))
        self.assertTrue(schedule_truncated(schedule))
        self.assertFalse(schedule_truncated(_default_schedule()))


class TestScheduleInvariants(unittest.TestCase):
    OVERRIDES = {
        1: Decimal("0"),
        2: Decimal("3000"),
        5: Decimal("900"),
        10: Decimal("-50"),
        24: Decimal("25000"),
        100: Decimal("0"),
    }

    def test_balance_chain(self):
        schedule = _default_schedule(self.OVERRIDES)
        previous = Decimal("315000")
        for row in schedule:
            self.assertEqual(row.starting_balance, previous)
            self.assertLessEqual(row.balance_after, previous)
            self.assertGreaterEqual(row.balance_after, 0)
            self.assertLessEqual(row.principal_paid, row.starting_balance)
            self.assertLessEqual(row.planned_principal, row.starting_balance)
            self.assertEqual(row.balance_after, row.starting_balance - row.principal_paid)
            self.assertFalse(row.extra_payment > 0 and row.shortfall > 0)
            previous = row.balance_after
        self.assertLess(len(schedule), MAX_MONTHS)
        self.assertLessEqual(schedule[-1].balance_after, EPSILON)

    def test_month_indices_and_dates_are_sequential(self):
        schedule = _default_schedule(self.OVERRIDES)

        self.assertEqual([r.month_index for r in schedule], list(range(1, len(schedule) + 1)))
        self.assertEqual(schedule[1].due_date, date(2026, 1, 1))
        self.assertEqual(schedule[12].due_date, date(2026, 12, 1))
        self.assertEqual(schedule[13].due_date, date(2027, 1, 1))

    def test_generation_is_repeatable_and_leaves_overrides_alone(self):
        overrides = dict(self.OVERRIDES)

        first = _default_schedule(overrides)
        second = _default_schedule(overrides)

        self.assertEqual(first, second)
        self.assertEqual(overrides, self.OVERRIDES)


if __name__ == "__main__":
    unittest.main()
