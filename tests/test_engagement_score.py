import random
import unittest

from factvault.scoring.engagement import baseline_score, clamp_engagement, engagement_score


class TestEngagementScore(unittest.TestCase):
    def test_signal_formula_with_comment_bonus(self):
        # floor(85 + 0.15 * 15) = 87, +2 for > 500 comments
        self.assertEqual(engagement_score(1500, 600), 89)

    def test_signal_formula_without_bonus(self):
        self.assertEqual(engagement_score(500, 10), 85)

    def test_bonuses_are_reclamped(self):
        self.assertEqual(engagement_score(20000, 600), 100)
        self.assertEqual(engagement_score(10001, 1), 100)
        self.assertEqual(engagement_score(9999, 1), 99)

    def test_signal_scores_stay_in_bounds(self):
        for upvotes in (1, 10, 999, 5000, 10000, 10001, 50000, 10**7):
            for comments in (1, 500, 501, 10**5):
                score = engagement_score(upvotes, comments)
                self.assertGreaterEqual(score, 1)
                self.assertLessEqual(score, 100)

    def test_missing_signal_uses_baseline(self):
        rng = random.Random(42)
        samples = [engagement_score(rng=rng) for _ in range(500)]
        samples += [engagement_score(1500, 0, rng=rng) for _ in range(100)]
        self.assertTrue(all(85 <= s <= 94 for s in samples))
        self.assertEqual(min(samples), 85)
        self.assertEqual(max(samples), 94)

    def test_seeded_rng_is_reproducible(self):
        a = [engagement_score(rng=random.Random(7)) for _ in range(5)]
        b = [engagement_score(rng=random.Random(7)) for _ in range(5)]
        self.assertEqual(a, b)

    def test_baseline_range(self):
        rng = random.Random(1)
        samples = [baseline_score(80, 15, rng=rng) for _ in range(500)]
        self.assertTrue(all(80 <= s <= 94 for s in samples))
        self.assertEqual(baseline_score(90, 0), 90)

    def test_clamp(self):
        self.assertEqual(clamp_engagement(-5), 1)
        self.assertEqual(clamp_engagement(150), 100)
        self.assertEqual(clamp_engagement(42), 42)


if __name__ == "__main__":
    unittest.main()
