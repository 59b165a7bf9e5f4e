import unittest
from dataclasses import FrozenInstanceError

from guideraffle.models import DrawFrom, RaffleSettings, clamp_max_winners


class ClampMaxWinnersTests(unittest.TestCase):
    def test_clamps_to_bounds(self):
        self.assertEqual(clamp_max_winners(0), 1)
        self.assertEqual(clamp_max_winners(-8), 1)
        self.assertEqual(clamp_max_winners(12), 12)
        self.assertEqual(clamp_max_winners(29), 28)

    def test_unparseable_input_becomes_one(self):
        self.assertEqual(clamp_max_winners(""), 1)
        self.assertEqual(clamp_max_winners("many"), 1)
        self.assertEqual(clamp_max_winners(None), 1)
        self.assertEqual(clamp_max_winners("7"), 7)


class RaffleSettingsTests(unittest.TestCase):
    def test_defaults(self):
        settings = RaffleSettings()
        self.assertEqual(settings.max_winners, 5)
        self.assertIs(settings.draw_from, DrawFrom.ALL)
        self.assertEqual(settings.selected_categories, frozenset())
        self.assertFalse(settings.is_filtered)

    def test_plain_values_are_normalized(self):
        settings = RaffleSettings(draw_from="filtered", selected_categories=["A", "B", "A"])
        self.assertIs(settings.draw_from, DrawFrom.FILTERED)
        self.assertEqual(settings.selected_categories, frozenset({"A", "B"}))
        self.assertTrue(settings.is_filtered)

    def test_unknown_mode_is_rejected(self):
        with self.assertRaises(ValueError):
            RaffleSettings(draw_from="departments")

    def test_settings_are_immutable(self):
        with self.assertRaises(FrozenInstanceError):
            RaffleSettings().max_winners = 3  # type: ignore[misc]

    def test_from_input_clamps_and_clears_categories_for_all(self):
        settings = RaffleSettings.from_input("40", "all", ["Billing"])
        self.assertEqual(settings.max_winners, 28)
        self.assertEqual(settings.selected_categories, frozenset())

        filtered = RaffleSettings.from_input(0, "filtered", ["Billing"])
        self.assertEqual(filtered.max_winners, 1)
        self.assertEqual(filtered.selected_categories, frozenset({"Billing"}))


if __name__ == "__main__":
    unittest.main()
