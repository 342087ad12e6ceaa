# comanda_digital/schemas/common.py
from decimal import Decimal
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Valores monetários ficam em Decimal internamente e saem como número no JSON
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base dos schemas da API: campos snake_case no Python, camelCase no JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ORMModel(CamelModel):
    class Config:
        from_attributes = True


class ApiResponse(CamelModel, Generic[T]):
    """Envelope padrão de sucesso: {success, data, message?}."""

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class ErrorResponse(CamelModel):
    success: bool = False
    error: str


class SideEffects(CamelModel):
    """Resultado dos efeitos colaterais isolados (auditoria e notificação) de uma operação."""

    audit_logged: bool = False
    notification_created: bool = False
