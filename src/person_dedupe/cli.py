from __future__ import annotations

import argparse
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from person_dedupe.config import ResolutionConfig
from person_dedupe.datasets import ReferenceDatasetGenerator
from person_dedupe.interfaces import RecordSource
from person_dedupe.log import configure_logging
from person_dedupe.models import ConfidenceTier, PersonRecord, ResolutionResult
from person_dedupe.runners import LocalResolutionPipeline, ParallelResolutionPipeline
from person_dedupe.sources import CsvRecordSource, write_records_csv


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    configure_logging(level=args.log_level, fmt=args.log_format)
    config = ResolutionConfig(**_config_overrides(args))

    if args.command == "resolve":
        source: RecordSource = CsvRecordSource(args.leads, args.contacts)
        leads, contacts = source.load()
        dataset_path = None
    else:
        leads, contacts = ReferenceDatasetGenerator(seed=args.seed).generate(
            size=args.size,
            duplicate_rate=args.duplicate_rate,
        )
        args.output_dir.mkdir(parents=True, exist_ok=True)
        dataset_path = _write_dataset(args.output_dir, leads, contacts)

    result = _run(
        config=config,
        leads=leads,
        contacts=contacts,
        workers=args.workers,
        clusters=args.clusters,
    )
    _write_outputs(args.output_dir, result, dataset_path, show=args.show)


def _run(
    *,
    config: ResolutionConfig,
    leads: Sequence[PersonRecord],
    contacts: Sequence[PersonRecord],
    workers: int,
    clusters: bool,
) -> ResolutionResult:
    cluster_min_tier = ConfidenceTier.HIGH if clusters else None
    if workers > 1:
        pipeline = ParallelResolutionPipeline(config, max_workers=workers, cluster_min_tier=cluster_min_tier)
        return pipeline.run(leads, contacts)
    return LocalResolutionPipeline(config, cluster_min_tier=cluster_min_tier).run(leads, contacts)


def _write_outputs(output_dir: Path, result: ResolutionResult, dataset_path: Path | None, show: int) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    recommendations_path = output_dir / "recommendations.json"
    summary_path = output_dir / "summary.json"

    _write_json(recommendations_path, [rec.to_dict() for rec in result.recommendations])
    _write_json(summary_path, result.summary.to_dict())
    if result.clusters:
        _write_json(output_dir / "clusters.json", [cluster.to_dict() for cluster in result.clusters])

    summary = result.summary
    if dataset_path is not None:
        print(f"Dataset: {dataset_path}")
    print(f"Recommendations: {recommendations_path}")
    print(f"Summary: {summary_path}")
    print("---")
    print(f"records={summary.record_count}")
    print(f"candidate_pairs={summary.candidate_count}")
    print(f"recommendations={summary.recommendation_count}")
    print(f"corporate_phones={summary.corporate_phones}")
    for tier, count in summary.by_tier.items():
        if count:
            print(f"tier.{tier}={count}")
    for note, count in summary.excluded_records.items():
        print(f"degraded[{note}]={count}")
    if result.clusters:
        print(f"clusters={len(result.clusters)}")
    if show > 0 and result.recommendations:
        print("---")
        print("top_recommendations=")
        print(json.dumps(_recommendation_preview(result, limit=show), indent=2))


def _recommendation_preview(result: ResolutionResult, limit: int) -> list[dict[str, Any]]:
    preview: list[dict[str, Any]] = []
    for rec in result.recommendations[:limit]:
        payload = rec.to_dict()
        preview.append(
            {
                "rank": payload["rank"],
                "pair": f"{payload['left']['kind']}:{payload['left']['id']} <> "
                f"{payload['right']['kind']}:{payload['right']['id']}",
                "tier": payload["tier"],
                "reason": payload["reason"],
                "action": payload["action"],
                "survivor": payload["survivor"]["id"],
            }
        )
    return preview


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="person-dedupe", description="Lead/Contact duplicate detection CLI")
    subparsers = parser.add_subparsers(dest="command")

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Match a Lead export against a Contact export and write merge recommendations",
    )
    resolve_parser.add_argument("--leads", type=Path, required=True)
    resolve_parser.add_argument("--contacts", type=Path, required=True)
    _add_common_arguments(resolve_parser, default_output=Path("data/resolve_output"))

    run_test_parser = subparsers.add_parser(
        "run-test",
        help="Generate a synthetic Lead/Contact dataset, run resolution, and output recommendations + summary",
    )
    run_test_parser.add_argument("--size", type=int, default=2000)
    run_test_parser.add_argument("--duplicate-rate", type=float, default=0.15)
    run_test_parser.add_argument("--seed", type=int, default=42)
    _add_common_arguments(run_test_parser, default_output=Path("data/cli_output"))

    return parser


def _add_common_arguments(parser: argparse.ArgumentParser, default_output: Path) -> None:
    parser.add_argument("--output-dir", type=Path, default=default_output)
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--clusters", action="store_true", help="Also group High+ pairs into clusters")
    parser.add_argument("--show", type=int, default=10)
    parser.add_argument("--name-prefix-length", type=int, default=None)
    parser.add_argument("--corporate-phone-threshold", type=int, default=None)
    parser.add_argument("--allow-email-aliases", action="store_true")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--log-format", choices=["json", "text"], default="text")


def _config_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.name_prefix_length is not None:
        overrides["name_prefix_length"] = args.name_prefix_length
    if args.corporate_phone_threshold is not None:
        overrides["corporate_phone_threshold"] = args.corporate_phone_threshold
    if args.allow_email_aliases:
        overrides["exclude_email_aliases"] = False
    return overrides


def _write_dataset(output_dir: Path, leads: list[PersonRecord], contacts: list[PersonRecord]) -> Path:
    write_records_csv(output_dir / "test_leads.csv", leads)
    write_records_csv(output_dir / "test_contacts.csv", contacts)
    return output_dir


def _write_json(path: Path, payload: object) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)


if __name__ == "__main__":
    main()
