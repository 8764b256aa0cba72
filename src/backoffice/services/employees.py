"""Employee roster backed by a live collection."""

from collections import defaultdict
from dataclasses import dataclass

from backoffice.adapters.firebase_realtime_database import RealtimeDatabase
from backoffice.domain.models import Employee, utc_timestamp
from backoffice.domain.paths import EMPLOYEES_PATH
from backoffice.errors import ValidationError
from backoffice.services.subscriptions import LiveCollection

NO_DEPARTMENT = "Sem Departamento"


@dataclass(frozen=True)
class EmployeeForm:
    """Fields typed by the operator when adding or editing an employee."""

    name: str
    start_year: str
    start_date: str
    end_date: str = ""
    department: str = ""

    def validate(self) -> None:
        """Require name, start year and start date."""
        if not (
            self.name.strip() and self.start_year.strip() and self.start_date.strip()
        ):
            raise ValidationError("Name, start year and start date are required")

    def payload(self) -> dict[str, object]:
        return {
            "name": self.name.strip(),
            "startYear": self.start_year.strip(),
            "startDate": self.start_date.strip(),
            "endDate": self.end_date.strip(),
            "department": self.department.strip(),
        }

    @classmethod
    def from_employee(cls, employee: Employee) -> "EmployeeForm":
        """Prefill a form for editing."""
        return cls(
            name=employee.name,
            start_year=employee.start_year,
            start_date=employee.start_date,
            end_date=employee.end_date or "",
            department=employee.department or "",
        )


class EmployeeRoster(LiveCollection[Employee]):
    """Staff members listed alphabetically."""

    def __init__(self, database: RealtimeDatabase) -> None:
        super().__init__(database, EMPLOYEES_PATH, Employee.from_remote)

    def arrange(self, items: list[Employee]) -> list[Employee]:
        return sorted(items, key=lambda employee: employee.name.casefold())

    @property
    def total(self) -> int:
        return len(self.items)

    def by_department(self) -> dict[str, list[Employee]]:
        """Group the roster by department name."""
        groups: dict[str, list[Employee]] = defaultdict(list)
        for employee in self.items:
            groups[employee.department or NO_DEPARTMENT].append(employee)
        return dict(groups)

    async def add(self, form: EmployeeForm) -> str:
        """Validate and create an employee record."""
        form.validate()
        now = utc_timestamp()
        return await self.create({**form.payload(), "createdAt": now, "updatedAt": now})

    async def edit(self, employee_id: str, form: EmployeeForm) -> None:
        """Validate and overwrite an employee's fields."""
        form.validate()
        await self.update(employee_id, {**form.payload(), "updatedAt": utc_timestamp()})

    async def remove(self, employee_id: str) -> None:
        await self.delete(employee_id)
