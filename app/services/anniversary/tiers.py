"""Congratulatory text keyed on how early an FID was registered."""

# (inclusive upper bound, message); checked in ascending order
FID_TIERS: list[tuple[int, str]] = [
    (1_000, "True OG! You were one of the first 1,000 on Farcaster"),
    (5_000, "Pioneer! You joined among the first 5,000 casters"),
    (10_000, "Early adopter! One of the first 10,000 on Farcaster"),
    (50_000, "Trailblazer! You made it in before 50,000 users"),
    (100_000, "Rising star! You joined within the first 100,000"),
    (500_000, "Welcome to the club! You're among the first 500,000"),
]
DEFAULT_TIER_MESSAGE = "Every journey starts somewhere. Happy casting!"


def classify_tier(fid: int) -> str:
    """Return the tier message for an FID. First matching threshold wins."""
    for upper_bound, message in FID_TIERS:
        if fid <= upper_bound:
            return message
    return DEFAULT_TIER_MESSAGE
