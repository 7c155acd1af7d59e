"""
Check a campaign's rotation - wheel layout, shares and the next target.

Reads from the live Supabase project configured in .env. Records nothing.

Usage:
    python scripts/check_rotation.py --slug acme-black-friday
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.redirect_service import RedirectError, preview_rotation


def check_rotation(slug: str) -> int:
    """Print the rotation preview for a campaign. Returns a process exit code."""

    try:
        preview = preview_rotation(slug)
    except RedirectError as e:
        print(f"[ERROR] {e} ({e.reason})")
        return 1

    print("=" * 60)
    print(f"ROTATION: {preview.slug}")
    print("=" * 60)
    print(f"Campaign id:          {preview.campaign_id}")
    print(f"Active:               {'yes' if preview.is_active else 'no'}")
    print(f"Wheel length:         {preview.wheel_length}")
    print(f"Clicks recorded:      {preview.campaign_clicks}")
    print(f"Next click goes to:   {preview.next_seller_id or 'N/A'}")
    print("=" * 60)

    print("\nShares:")
    print("-" * 60)
    for share in preview.shares:
        marker = "->" if share.seller_id == preview.next_seller_id else "  "
        excluded = "" if share.slots else "  [excluded]"
        print(
            f"{marker} {share.name:<20} weight={share.weight:<3} slots={share.slots:<3} "
            f"{share.percentage:>6.2f}%  contacts={share.contact_count}{excluded}"
        )
    print("-" * 60)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Preview a campaign's seller rotation")
    parser.add_argument("--slug", required=True, help="Campaign slug")
    args = parser.parse_args()
    sys.exit(check_rotation(args.slug))


if __name__ == "__main__":
    main()
