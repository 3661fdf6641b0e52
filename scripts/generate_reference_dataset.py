from __future__ import annotations

import argparse
from pathlib import Path

from person_dedupe.datasets import ReferenceDatasetGenerator
from person_dedupe.sources import write_records_csv


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate synthetic Lead and Contact exports")
    parser.add_argument("--size", type=int, default=10000)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--duplicate-rate", type=float, default=0.15)
    parser.add_argument("--output-dir", type=Path, default=Path("data"))
    args = parser.parse_args()

    leads, contacts = ReferenceDatasetGenerator(seed=args.seed).generate(
        size=args.size,
        duplicate_rate=args.duplicate_rate,
    )

    args.output_dir.mkdir(parents=True, exist_ok=True)
    write_records_csv(args.output_dir / "reference_leads.csv", leads)
    write_records_csv(args.output_dir / "reference_contacts.csv", contacts)


if __name__ == "__main__":
    main()
