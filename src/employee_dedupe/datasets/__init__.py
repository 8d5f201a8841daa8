from employee_dedupe.datasets.profiles import EMPLOYEE_COLUMNS, PROVENANCE_COLUMNS, record_from_row, record_to_row
from employee_dedupe.datasets.reference import EmployeeDatasetGenerator

__all__ = [
    "EMPLOYEE_COLUMNS",
    "PROVENANCE_COLUMNS",
    "EmployeeDatasetGenerator",
    "record_from_row",
    "record_to_row",
]
