import unittest

from lottobridge.types import DrawPeriod
from lottobridge.validation import compose, validate


class ValidateTests(unittest.TestCase):
    def test_accepts_exact_format(self) -> None:
        self.assertEqual(validate("123-4567", DrawPeriod.MIDDAY), "123-4567")
        self.assertEqual(validate("000-0000", DrawPeriod.EVENING), "000-0000")

    def test_rejects_malformed_candidates(self) -> None:
        candidates = [
            "12-4567",
            "123-456",
            "1234-567",
            "",
            "123-",
            "-4567",
            " 123-4567",
            "123-4567 ",
            "123-4567\n",
            "1234567",
            "abc-defg",
            "١٢٣-٤٥٦٧",
        ]
        for candidate in candidates:
            with self.subTest(candidate=candidate):
                self.assertIsNone(validate(candidate, DrawPeriod.MIDDAY))

    def test_rejects_none(self) -> None:
        self.assertIsNone(validate(None, DrawPeriod.EVENING))


class ComposeTests(unittest.TestCase):
    def test_joins_both_halves(self) -> None:
        self.assertEqual(compose("123", "4567", DrawPeriod.MIDDAY), "123-4567")

    def test_missing_half_yields_none(self) -> None:
        self.assertIsNone(compose("123", None, DrawPeriod.EVENING))
        self.assertIsNone(compose(None, "4567", DrawPeriod.EVENING))
        self.assertIsNone(compose("", "4567", DrawPeriod.EVENING))

    def test_wrong_digit_count_yields_none(self) -> None:
        self.assertIsNone(compose("12", "4567", DrawPeriod.MIDDAY))
        self.assertIsNone(compose("123", "45678", DrawPeriod.MIDDAY))


if __name__ == "__main__":
    unittest.main()
