"""Employee roster screen."""

from backoffice.adapters.firebase_realtime_database import RealtimeDatabase
from backoffice.screens.feedback import Feedback, run_action
from backoffice.services.employees import EmployeeForm, EmployeeRoster
from backoffice.services.subscriptions import SubscriptionManager


class EmployeesScreen:
    """Lists staff and saves the employee form."""

    def __init__(self, database: RealtimeDatabase) -> None:
        self.subscriptions = SubscriptionManager()
        self.roster = EmployeeRoster(database)

    def mount(self) -> None:
        self.subscriptions.acquire("employees", self.roster)

    def unmount(self) -> None:
        self.subscriptions.release_all()

    async def save(self, form: EmployeeForm, employee_id: str | None = None) -> Feedback:
        """Create a record, or update it when an id is given."""
        if employee_id:
            return await run_action(
                self.roster.edit(employee_id, form),
                success="Registo de trabalhador atualizado.",
                failure="Não foi possível guardar o registo. Tente novamente.",
                invalid="Nome, ano de entrada e data de início são obrigatórios.",
            )
        return await run_action(
            self.roster.add(form),
            success="Registo de trabalhador criado.",
            failure="Não foi possível guardar o registo. Tente novamente.",
            invalid="Nome, ano de entrada e data de início são obrigatórios.",
        )

    async def delete(self, employee_id: str) -> Feedback:
        return await run_action(
            self.roster.remove(employee_id),
            success="O trabalhador foi removido.",
            failure="Não foi possível remover o trabalhador.",
            invalid="Trabalhador inválido.",
        )
