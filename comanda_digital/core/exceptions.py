from typing import Optional

from fastapi import status


class AppError(Exception):
    """Erro de domínio convertido no envelope JSON padrão pela app."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Erro interno do servidor"

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Dados inválidos"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Registro não encontrado"


class ConflictError(AppError):
    # Pré-condição violada (mesa já ocupada, mesa de origem livre...)
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Operação conflita com o estado atual"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Credenciais inválidas"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Sem permissão para esta operação"


class DatabaseError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Erro de banco de dados"


class InternalError(AppError):
    """Falha em fluxo de várias etapas; o estado foi revertido ou precisa de conciliação."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Erro interno do servidor"
