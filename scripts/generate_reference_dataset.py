from __future__ import annotations

import argparse
import csv
from pathlib import Path

from employee_dedupe.datasets import EMPLOYEE_COLUMNS, EmployeeDatasetGenerator, record_to_row


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate synthetic employee dataset")
    parser.add_argument("--size", type=int, default=10000)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--duplicate-rate", type=float, default=0.15)
    parser.add_argument("--output", type=Path, default=Path("data/reference_employees.csv"))
    args = parser.parse_args()

    records = EmployeeDatasetGenerator(seed=args.seed).generate(size=args.size, duplicate_rate=args.duplicate_rate)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with args.output.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=[*EMPLOYEE_COLUMNS, "SOURCE_SYSTEM"], extrasaction="ignore")
        writer.writeheader()
        for record in records:
            writer.writerow(record_to_row(record))


if __name__ == "__main__":
    main()
