#!/usr/bin/env python3
"""CLI tool to resolve owners for one or more parcel JSON files.

Each input file holds one parcel, or a list of parcels, shaped like:

    {
      "property_id": "12345",
      "current_owners": ["SMITH JOHN & JANE"],
      "sales": [{"date": "2020-01-05", "grantor": "DOE JANE", "grantee": "SMITH JOHN & JANE"}]
    }

Usage:
    python run_owners.py <parcel.json> [...]               # Pretty print timelines
    python run_owners.py <parcel.json> --json              # Print owner_data JSON
    python run_owners.py <parcel.json> --out               # Write owners/owner_data.json
    python run_owners.py <parcel.json> --out data/x.json   # Write to a chosen file
    python run_owners.py <parcel.json> --trace             # Per-candidate OWNER_TRACE logs
    python run_owners.py <parcel.json> --name-order first_last

Parcels without a property_id are keyed by their file name.
"""

import argparse
import json
import os
import sys
from pathlib import Path

# Ensure the package is importable when run from a checkout
sys.path.insert(0, str(Path(__file__).resolve().parent))

from owner_resolution.config import NAME_ORDERS, OUTPUT_DIR


def load_parcels(path: Path) -> list[dict]:
    """Load the parcel record(s) from one JSON file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read {path}: {e}")
        sys.exit(1)

    parcels = data if isinstance(data, list) else [data]
    for i, parcel in enumerate(parcels):
        if not isinstance(parcel, dict):
            print(f"{path}: entry {i} is not a parcel object")
            sys.exit(1)
        if not parcel.get("property_id"):
            suffix = f"_{i + 1}" if len(parcels) > 1 else ""
            parcel = {**parcel, "property_id": f"{path.stem}{suffix}"}
            parcels[i] = parcel
    return parcels


def resolve_parcels(parcels: list[dict], trace: bool = False, name_order: str | None = None) -> dict:
    """Resolve every parcel into the ``{"property_<id>": {...}}`` owner_data shape."""
    if trace:
        os.environ["OWNER_TRACE"] = "1"
        import importlib
        import owner_resolution.config
        importlib.reload(owner_resolution.config)

    import logging
    if trace:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    from owner_resolution.pipeline.timeline import build_ownership_timeline

    owner_data = {}
    for parcel in parcels:
        timeline = build_ownership_timeline(
            parcel.get("current_owners"),
            parcel.get("sales"),
            name_order=name_order,
        )
        owner_data[f"property_{parcel['property_id']}"] = timeline.to_dict()
    return owner_data


def print_owner_data(owner_data: dict):
    for key, record in owner_data.items():
        print(f"\n{'═' * 70}")
        print(f"  {key}")
        print(f"{'═' * 70}")
        for date_key, owners in record["owners_by_date"].items():
            print(f"\n  {date_key} ({len(owners)})")
            print(f"  {'─' * 60}")
            for o in owners:
                if o["type"] == "company":
                    print(f"  ▪ {o['name']}")
                    continue
                name = " ".join(
                    p for p in (o["prefix_name"], o["first_name"], o["middle_name"],
                                o["last_name"], o["suffix_name"]) if p
                )
                share = o.get("ownership_interest_fraction")
                print(f"  • {name}" + (f"  [{share}]" if share else ""))
        invalid = record["invalid_owners"]
        if invalid:
            print(f"\n  INVALID ({len(invalid)})")
            print(f"  {'─' * 60}")
            for e in invalid:
                print(f"  ✗ {e['raw']!r}: {e['reason']}")
        print()


def main():
    parser = argparse.ArgumentParser(
        description="Owner resolution CLI — resolve parcel owner strings into owners_by_date",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("files", nargs="*", help="Parcel JSON file(s)")
    parser.add_argument("--trace", action="store_true", help="Enable OWNER_TRACE debug output")
    parser.add_argument("--json", action="store_true", help="Output raw JSON instead of pretty print")
    parser.add_argument(
        "--out", nargs="?", const=str(OUTPUT_DIR / "owner_data.json"), default=None,
        help="Write owner_data JSON (default: owners/owner_data.json)",
    )
    parser.add_argument("--name-order", choices=NAME_ORDERS, default=None,
                        help="Name order for all-uppercase owner strings")

    args = parser.parse_args()

    if not args.files:
        parser.print_help()
        return

    parcels = []
    for f in args.files:
        path = Path(f)
        if not path.exists():
            print(f"File '{f}' not found.")
            sys.exit(1)
        parcels.extend(load_parcels(path))

    owner_data = resolve_parcels(parcels, trace=args.trace, name_order=args.name_order)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(owner_data, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"Wrote {len(owner_data)} parcel(s) to {out_path}")
    elif args.json:
        print(json.dumps(owner_data, indent=2, ensure_ascii=False))
    else:
        print_owner_data(owner_data)


if __name__ == "__main__":
    main()
