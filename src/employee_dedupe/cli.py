from __future__ import annotations

import argparse
import csv
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from employee_dedupe.config import ClusteringStrategy, MatchingConfig
from employee_dedupe.datasets import (
    EMPLOYEE_COLUMNS,
    PROVENANCE_COLUMNS,
    EmployeeDatasetGenerator,
    record_from_row,
    record_to_row,
)
from employee_dedupe.engine import DetectionEngine
from employee_dedupe.errors import ConfigError, DedupeError, StaleGroupError
from employee_dedupe.models import DetectionResult, EmployeeRecord
from employee_dedupe.review import format_value, similarity_band
from employee_dedupe.schema import descriptor_for
from employee_dedupe.steps.quality import QualityAuditor

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(args, "log_level", "WARNING"), format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return

    try:
        if args.command == "detect":
            records = _read_records_csv(args.input_csv)
            run_detect(records, engine=_build_engine(args), output_dir=args.output_dir, show_groups=args.show_groups)
        elif args.command == "run-test":
            run_test(
                size=args.size,
                duplicate_rate=args.duplicate_rate,
                seed=args.seed,
                output_dir=args.output_dir,
                engine=_build_engine(args),
                show_groups=args.show_groups,
            )
        elif args.command == "merge":
            run_merge(
                input_csv=args.input_csv,
                output_csv=args.output_csv,
                engine=_build_engine(args),
                min_confidence=args.min_confidence,
            )
        elif args.command == "audit":
            report = QualityAuditor().audit(_read_records_csv(args.input_csv))
            print(json.dumps(asdict(report), indent=2))
    except DedupeError as exc:
        logger.error("%s", exc)
        raise SystemExit(2) from exc


def run_test(
    *,
    size: int,
    duplicate_rate: float,
    seed: int,
    output_dir: Path,
    engine: DetectionEngine,
    show_groups: int,
) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    records = EmployeeDatasetGenerator(seed=seed).generate(size=size, duplicate_rate=duplicate_rate)
    dataset_path = output_dir / "test_dataset.csv"
    _write_records_csv(dataset_path, records)
    print(f"Dataset: {dataset_path}")
    run_detect(records, engine=engine, output_dir=output_dir, show_groups=show_groups)


def run_detect(
    records: list[EmployeeRecord],
    *,
    engine: DetectionEngine,
    output_dir: Path,
    show_groups: int,
) -> DetectionResult:
    output_dir.mkdir(parents=True, exist_ok=True)
    result = engine.detect_duplicates(records)

    groups_path = output_dir / "groups.json"
    summary_path = output_dir / "summary.json"
    _write_json(groups_path, [asdict(group) for group in result.duplicate_groups])
    summary = _build_summary(record_count=len(records), result=result, groups_path=groups_path)
    _write_json(summary_path, summary)

    print(f"Groups: {groups_path}")
    print(f"Summary: {summary_path}")
    print("---")
    print(f"records={summary['record_count']}")
    print(f"duplicate_groups={summary['group_count']}")
    print(f"affected_employees={summary['affected_employees']}")
    print(f"avg_group_size={summary['avg_group_size']}")
    print(f"auto_merge_candidates={summary['auto_merge_count']}")
    if show_groups > 0:
        print("---")
        print("sample_groups=")
        print(json.dumps(_group_sample_payload(result, records, limit=show_groups), indent=2))
    return result


def run_merge(
    *,
    input_csv: Path,
    output_csv: Path,
    engine: DetectionEngine,
    min_confidence: float,
) -> list[EmployeeRecord]:
    records = _read_records_csv(input_csv)
    result = engine.detect_duplicates(records)

    updated = records
    for suggestion in result.suggestions:
        if suggestion.confidence < min_confidence:
            logger.info("Leaving group %s for review (confidence %.3f)", suggestion.group_id, suggestion.confidence)
            continue
        try:
            updated = engine.execute_merge(suggestion.group_id, updated, session=result.session)
        except StaleGroupError as exc:
            logger.warning("Leaving group %s for review: %s", suggestion.group_id, exc)

    _write_records_csv(output_csv, updated)
    print(f"records_in={len(records)}")
    print(f"records_out={len(updated)}")
    print(f"merged_groups={len(result.session.merge_history)}")
    print(f"Output: {output_csv}")
    return updated


def _build_summary(
    *,
    record_count: int,
    result: DetectionResult,
    groups_path: Path,
) -> dict[str, object]:
    group_sizes = [len(group.member_indices) for group in result.duplicate_groups]
    confidences = [group.confidence for group in result.duplicate_groups]
    conflict_count = sum(len(group.suggested_merge.conflicts) for group in result.duplicate_groups)

    return {
        "record_count": record_count,
        "group_count": result.total_duplicates,
        "affected_employees": result.affected_employees,
        "avg_group_size": round(sum(group_sizes) / len(group_sizes), 3) if group_sizes else 0.0,
        "max_group_size": max(group_sizes) if group_sizes else 0,
        "avg_confidence": round(sum(confidences) / len(confidences), 4) if confidences else 0.0,
        "conflict_count": conflict_count,
        "auto_merge_count": sum(1 for suggestion in result.suggestions if suggestion.auto_merge),
        "groups_path": str(groups_path),
    }


def _build_engine(args: argparse.Namespace) -> DetectionEngine:
    config = MatchingConfig()
    if args.config is not None:
        try:
            with args.config.open("r", encoding="utf-8") as handle:
                config = MatchingConfig.from_mapping(json.load(handle))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"cannot read configuration {args.config}: {exc}") from exc
    if args.strategy is not None:
        config = config.with_strategy(args.strategy)
    return DetectionEngine(config=config)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="employee-dedupe", description="Employee record dedupe CLI")
    subparsers = parser.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")

    matching = argparse.ArgumentParser(add_help=False)
    matching.add_argument("--config", type=Path, default=None, help="JSON file with MatchingConfig overrides")
    matching.add_argument("--strategy", choices=[strategy.value for strategy in ClusteringStrategy], default=None)

    detect_parser = subparsers.add_parser(
        "detect",
        parents=[common, matching],
        help="Detect duplicate groups in a CSV of employee records",
    )
    detect_parser.add_argument("--input-csv", type=Path, required=True)
    detect_parser.add_argument("--output-dir", type=Path, default=Path("data/cli_output"))
    detect_parser.add_argument("--show-groups", type=int, default=10)

    run_test_parser = subparsers.add_parser(
        "run-test",
        parents=[common, matching],
        help="Generate a synthetic employee dataset, run detection, and output groups + summary",
    )
    run_test_parser.add_argument("--size", type=int, default=500)
    run_test_parser.add_argument("--duplicate-rate", type=float, default=0.15)
    run_test_parser.add_argument("--seed", type=int, default=42)
    run_test_parser.add_argument("--output-dir", type=Path, default=Path("data/cli_output"))
    run_test_parser.add_argument("--show-groups", type=int, default=10)

    merge_parser = subparsers.add_parser(
        "merge",
        parents=[common, matching],
        help="Apply every suggested merge at or above a confidence floor",
    )
    merge_parser.add_argument("--input-csv", type=Path, required=True)
    merge_parser.add_argument("--output-csv", type=Path, required=True)
    merge_parser.add_argument("--min-confidence", type=float, default=0.95)

    audit_parser = subparsers.add_parser("audit", parents=[common], help="Print a data quality report")
    audit_parser.add_argument("--input-csv", type=Path, required=True)

    return parser


def _write_json(path: Path, payload: object) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)


def _write_records_csv(path: Path, records: list[EmployeeRecord]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    extra_columns = sorted({key for record in records for key in record.attributes})
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=[*EMPLOYEE_COLUMNS, *PROVENANCE_COLUMNS, *extra_columns])
        writer.writeheader()
        for record in records:
            writer.writerow(record_to_row(record))


def _read_records_csv(path: Path) -> list[EmployeeRecord]:
    records: list[EmployeeRecord] = []
    with path.open("r", newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            if not (row.get("ID") or "").strip():
                logger.warning("Skipping row %d without ID", reader.line_num)
                continue
            records.append(record_from_row(row))
    return records


def _group_sample_payload(
    result: DetectionResult,
    records: list[EmployeeRecord],
    limit: int = 10,
) -> list[dict[str, Any]]:
    ranked = sorted(result.duplicate_groups, key=lambda group: (-group.confidence, group.id))
    payload: list[dict[str, Any]] = []

    for group in ranked[:limit]:
        conflicts = {
            conflict.field.value: [
                format_value(value, descriptor_for(conflict.field).kind) for value in conflict.values
            ]
            for conflict in group.suggested_merge.conflicts
        }
        payload.append(
            {
                "group_id": group.id,
                "size": len(group.member_indices),
                "confidence": round(group.confidence, 4),
                "band": similarity_band(group.confidence),
                "names": [records[idx].name for idx in group.member_indices],
                "base_record_id": group.suggested_merge.base_record_id,
                "conflicts": conflicts,
            }
        )
    return payload


if __name__ == "__main__":
    main()
