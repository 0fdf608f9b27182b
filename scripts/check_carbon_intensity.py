"""
Check carbon intensity for one or more countries.

Resolves each country code through the same resolver the API uses (live data
when CO2SIGNAL_API_KEY is set, static fallback otherwise) and prints the
results along with cache statistics.

Usage:
    python scripts/check_carbon_intensity.py US DE FR
    python scripts/check_carbon_intensity.py --fallback-only IN
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from repositories.client import load_provider_settings
from services.carbon_intensity_service import CarbonIntensityResolver


async def check_carbon_intensity(country_codes: list[str], fallback_only: bool = False) -> None:
    """Print intensity for each country code and the resulting cache state."""

    resolver = CarbonIntensityResolver(settings=load_provider_settings())

    try:
        if fallback_only:
            samples = [resolver.fallback_sample(code) for code in country_codes]
        else:
            samples = await resolver.resolve_many(country_codes)

        print("=" * 60)
        print("CARBON INTENSITY")
        print("=" * 60)
        print(f"Live data configured:  {'yes' if resolver.live_enabled else 'no'}")
        print("-" * 60)

        for sample in samples:
            extra = ""
            if sample.renewable_pct is not None:
                extra = f"  renewable {sample.renewable_pct:.1f}%"
            print(
                f"{sample.region_key:<8} {sample.region:<24} "
                f"{sample.intensity:>8.1f} gCO2/kWh  [{sample.source.value}]{extra}"
            )

        stats = resolver.cache_stats()
        print("-" * 60)
        print(f"Cache entries: {stats.total} (valid {stats.valid}, expired {stats.expired})")
        print(f"Cache TTL:     {stats.ttl_minutes:.1f} minutes")
        print("=" * 60)

    finally:
        await resolver.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Check grid carbon intensity by country code")
    parser.add_argument("country_codes", nargs="+", help="2-letter ISO country codes, e.g. US DE FR")
    parser.add_argument(
        "--fallback-only",
        action="store_true",
        help="Skip the live provider and show static fallback values",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show resolver log output")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    asyncio.run(check_carbon_intensity(args.country_codes, fallback_only=args.fallback_only))


if __name__ == "__main__":
    main()
