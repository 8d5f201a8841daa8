from __future__ import annotations

import random
from dataclasses import replace

from employee_dedupe.models import EmployeeRecord, PerformanceRating, Salary

_FIRST_NAMES = [
    "Dominique",
    "Luke",
    "Alex",
    "Sofia",
    "Maya",
    "Daniel",
    "Emma",
    "Chris",
    "Olivia",
    "Noah",
]
_LAST_NAMES = [
    "Smith",
    "Johnson",
    "Brown",
    "Taylor",
    "Wilson",
    "Davies",
    "Martin",
    "Thomas",
]
_TITLES = [
    "Software Engineer",
    "Senior Software Engineer",
    "Product Manager",
    "Data Analyst",
    "HR Business Partner",
    "Sales Director",
]
_COUNTRIES = {"US": "USD", "GB": "GBP", "DE": "EUR", "IE": "EUR"}
_RATINGS = {
    1: "Below Expectations",
    2: "Partially Meets",
    3: "Meets Expectations",
    4: "Exceeds Expectations",
    5: "Outstanding",
}
_SOURCES = ["workday", "sap", "bamboohr"]


class EmployeeDatasetGenerator:
    """Generate synthetic employee records (with intentional dupes) for tests and benchmarks."""

    def __init__(self, seed: int = 7) -> None:
        self._rng = random.Random(seed)

    def generate(self, size: int, duplicate_rate: float = 0.15) -> list[EmployeeRecord]:
        if size <= 0:
            return []

        records: list[EmployeeRecord] = []
        unique_count = int(size * (1.0 - duplicate_rate))
        unique_count = max(1, min(unique_count, size))

        for i in range(unique_count):
            records.append(self._employee(i))

        while len(records) < size:
            source = self._rng.choice(records[:unique_count])
            records.append(self._perturb(source, record_id=f"emp_{len(records):07d}"))

        self._rng.shuffle(records)
        return records

    def _employee(self, idx: int) -> EmployeeRecord:
        first_name = self._rng.choice(_FIRST_NAMES)
        last_name = self._rng.choice(_LAST_NAMES)
        country = self._rng.choice(sorted(_COUNTRIES))
        rating = self._rng.randint(1, 5)

        return EmployeeRecord(
            id=f"emp_{idx:07d}",
            name=f"{first_name} {last_name}",
            title=self._rng.choice(_TITLES),
            country=country,
            salary=Salary(amount=float(self._rng.randrange(40_000, 180_000, 500)), currency=_COUNTRIES[country]),
            comparatio=round(self._rng.uniform(0.8, 1.2), 2),
            performance_rating=PerformanceRating(score=rating, text=_RATINGS[rating]),
            future_talent=self._rng.random() < 0.2,
            time_in_role=float(self._rng.randint(1, 96)),
            time_since_raise=float(self._rng.randint(0, 36)),
            attributes={"SOURCE_SYSTEM": self._rng.choice(_SOURCES)},
        )

    def _perturb(self, source: EmployeeRecord, record_id: str) -> EmployeeRecord:
        mutation = self._rng.choice(["name", "title", "salary", "sparse", "mixed"])
        record = replace(source, id=record_id, attributes={"SOURCE_SYSTEM": self._rng.choice(_SOURCES)})

        if mutation in {"name", "mixed"} and record.name:
            record = replace(record, name=self._name_variant(record.name))
        if mutation in {"title", "mixed"} and record.title:
            record = replace(record, title=self._title_variant(record.title))
        if mutation in {"salary", "mixed"} and record.salary and record.salary.amount:
            drift = self._rng.uniform(-0.05, 0.05)
            record = replace(record, salary=replace(record.salary, amount=round(record.salary.amount * (1 + drift))))
        if mutation == "sparse":
            record = replace(
                record,
                comparatio=None,
                performance_rating=None,
                time_in_role=None,
                time_since_raise=self._rng.choice([None, record.time_since_raise]),
            )
        return record

    def _name_variant(self, name: str) -> str:
        first, _, last = name.partition(" ")
        variant = self._rng.choice(["reorder", "typo", "case", "initial"])

        if variant == "reorder":
            return f"{last}, {first}"
        if variant == "typo" and len(last) > 4:
            return f"{first} {last[:-1]}"
        if variant == "case":
            return name.upper()
        return f"{first} {self._rng.choice('ABCDEFGHJKLMNPRSTW')}. {last}"

    def _title_variant(self, title: str) -> str:
        if title.startswith("Senior "):
            return title.replace("Senior ", "Sr. ", 1)
        if self._rng.random() < 0.5:
            return title.lower()
        return f"{title} II"
