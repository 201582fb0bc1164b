"""
Cost calculation for video generation.

All functions are pure. Amounts are returned at full floating point
precision; rounding is left to display code such as ``format_cost``.
"""

from .registry import ProviderDescriptor


def calculate_cost(descriptor: ProviderDescriptor, total_seconds: float) -> float:
    """
    Cost of generating ``total_seconds`` of video with a provider.

    Args:
        descriptor: Provider whose pricing applies
        total_seconds: Seconds of video, already multiplied by the clip count

    Returns:
        Cost in the provider's currency

    Raises:
        ValueError: If total_seconds is negative
    """
    if total_seconds < 0:
        raise ValueError("Total seconds must not be negative")
    return descriptor.pricing.cost_per_second * total_seconds


def estimate_cost(
    descriptor: ProviderDescriptor,
    duration_seconds: int,
    number_of_videos: int = 1
) -> float:
    """Cost of ``number_of_videos`` clips of ``duration_seconds`` each."""
    return calculate_cost(descriptor, duration_seconds * number_of_videos)


def billable_seconds(descriptor: ProviderDescriptor, total_seconds: float) -> float:
    """Seconds left to pay for once the monthly free tier is used up."""
    free_tier = descriptor.pricing.free_tier
    if free_tier is None:
        return total_seconds
    return max(0, total_seconds - free_tier.seconds)


def format_cost(amount: float, currency: str = "USD") -> str:
    if currency == "USD":
        return f"${amount:.2f}"
    return f"{amount:.2f} {currency}"
