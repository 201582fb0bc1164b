"""
Unit tests for the provider registry and cost calculator.
"""

import unittest
from dataclasses import replace

from video_router.registry import (
    VIDEO_PROVIDERS,
    ProviderCapabilities,
    get_all_providers,
    get_default_model,
    get_provider_by_id,
    get_provider_ids,
    get_providers_by_budget,
    is_duration_supported,
    validate_descriptor,
)
from video_router.pricing import billable_seconds, calculate_cost, estimate_cost, format_cost


class TestProviderLookup(unittest.TestCase):
    """Test registry accessors."""

    def test_registration_order(self):
        self.assertEqual(
            get_provider_ids(),
            ["veo-2", "veo-3", "runwayml", "luma", "pika", "stability", "openai-sora"]
        )
        self.assertEqual([d.id for d in get_all_providers()], get_provider_ids())

    def test_get_provider_by_id(self):
        descriptor = get_provider_by_id("luma")
        self.assertIsNotNone(descriptor)
        self.assertEqual(descriptor.name, "Luma Dream Machine")
        self.assertEqual(descriptor.pricing.cost_per_second, 0.02)
        self.assertEqual(descriptor.max_duration, 5)

    def test_unknown_provider_returns_none(self):
        self.assertIsNone(get_provider_by_id("unknown"))
        self.assertIsNone(get_provider_by_id(""))

    def test_registry_is_read_only(self):
        with self.assertRaises(TypeError):
            VIDEO_PROVIDERS["new"] = get_provider_by_id("luma")

    def test_every_descriptor_is_consistent(self):
        for descriptor in get_all_providers():
            validate_descriptor(descriptor)

    def test_default_model(self):
        self.assertEqual(get_default_model("veo-3"), "veo3-fast")
        self.assertEqual(get_default_model("runwayml"), "gen4")
        with self.assertRaises(ValueError):
            get_default_model("unknown")


class TestBudgetFilter(unittest.TestCase):
    """Test get_providers_by_budget."""

    def test_filter_is_inclusive_and_keeps_order(self):
        ids = [d.id for d in get_providers_by_budget(0.03)]
        self.assertEqual(ids, ["luma", "pika", "stability"])

    def test_budget_below_everything(self):
        self.assertEqual(get_providers_by_budget(0.001), [])

    def test_budget_above_everything(self):
        self.assertEqual(len(get_providers_by_budget(1.0)), len(get_all_providers()))


class TestDescriptorValidation(unittest.TestCase):
    """Test validate_descriptor and is_duration_supported."""

    def setUp(self):
        self.descriptor = get_provider_by_id("luma")

    def test_duration_outside_max_rejected(self):
        caps = replace(self.descriptor.capabilities, supported_durations=(3, 9))
        with self.assertRaises(ValueError):
            validate_descriptor(replace(self.descriptor, capabilities=caps))

    def test_multiple_videos_flag_must_match_max(self):
        caps = replace(self.descriptor.capabilities, max_videos=2)
        with self.assertRaises(ValueError):
            validate_descriptor(replace(self.descriptor, capabilities=caps))

    def test_listed_fps_requires_flag(self):
        caps = ProviderCapabilities(supported_fps=(24,))
        with self.assertRaises(ValueError):
            validate_descriptor(replace(self.descriptor, capabilities=caps))

    def test_no_models_rejected(self):
        with self.assertRaises(ValueError):
            validate_descriptor(replace(self.descriptor, models=()))

    def test_duration_support(self):
        self.assertTrue(is_duration_supported(self.descriptor, 5))
        self.assertFalse(is_duration_supported(self.descriptor, 2))
        self.assertFalse(is_duration_supported(self.descriptor, 6))

    def test_empty_durations_mean_continuous_range(self):
        caps = replace(self.descriptor.capabilities, supported_durations=())
        descriptor = replace(self.descriptor, capabilities=caps)
        self.assertTrue(is_duration_supported(descriptor, 1))
        self.assertTrue(is_duration_supported(descriptor, 5))
        self.assertFalse(is_duration_supported(descriptor, 6))

    def test_to_dict(self):
        data = get_provider_by_id("veo-3").to_dict()
        self.assertEqual(data["id"], "veo-3")
        self.assertEqual(data["pricing"]["free_tier"]["seconds"], 20)
        self.assertEqual(data["capabilities"]["supported_resolutions"], ["720p", "1080p"])

    def test_auth_types(self):
        self.assertEqual(get_provider_by_id("veo-2").auth_type, "api_key")
        self.assertEqual(get_provider_by_id("veo-3").auth_type, "bearer")
        self.assertEqual(get_provider_by_id("luma").auth_type, "bearer")


class TestCostCalculator(unittest.TestCase):
    """Test pricing functions."""

    def test_calculate_cost(self):
        self.assertAlmostEqual(calculate_cost(get_provider_by_id("veo-2"), 10), 3.5)
        self.assertAlmostEqual(calculate_cost(get_provider_by_id("stability"), 5), 0.05)

    def test_zero_seconds_is_free(self):
        self.assertEqual(calculate_cost(get_provider_by_id("veo-3"), 0), 0)

    def test_negative_seconds_rejected(self):
        with self.assertRaises(ValueError):
            calculate_cost(get_provider_by_id("veo-3"), -1)

    def test_estimate_multiplies_by_count(self):
        descriptor = get_provider_by_id("runwayml")
        self.assertAlmostEqual(estimate_cost(descriptor, 10, 2), 1.0)
        self.assertAlmostEqual(
            estimate_cost(descriptor, 10, 2),
            calculate_cost(descriptor, 20)
        )

    def test_billable_seconds_subtracts_free_tier(self):
        descriptor = get_provider_by_id("openai-sora")
        self.assertEqual(billable_seconds(descriptor, 30), 20)
        self.assertEqual(billable_seconds(descriptor, 5), 0)

    def test_format_cost(self):
        self.assertEqual(format_cost(0.4), "$0.40")
        self.assertEqual(format_cost(1.5, "EUR"), "1.50 EUR")


if __name__ == "__main__":
    unittest.main()
