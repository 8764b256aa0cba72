"""Login screen."""

from dataclasses import dataclass

from backoffice.errors import AuthenticationError, ValidationError
from backoffice.screens.feedback import Feedback
from backoffice.services.auth import AuthContext
from backoffice.services.credentials import CredentialExchange


@dataclass
class LoginScreen:
    """Collects credentials and hands the resulting session to the auth context."""

    auth: AuthContext
    exchange: CredentialExchange
    submitting: bool = False

    async def submit(self, email: str, password: str) -> Feedback:
        """Attempt a sign-in; the auth context is untouched on failure."""
        if self.submitting:
            return Feedback.failure("Autenticação em curso.")
        self.submitting = True
        try:
            await self.auth.sign_in(self.exchange, email, password)
        except ValidationError as exc:
            return Feedback.failure("Introduza o email e a palavra-passe.", exc)
        except AuthenticationError as exc:
            return Feedback.failure(
                "Falha na autenticação. Verifique as credenciais ou tente "
                "novamente mais tarde.",
                exc,
            )
        finally:
            self.submitting = False
        return Feedback.success("Sessão iniciada.")
