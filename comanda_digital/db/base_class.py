import enum
import uuid
from typing import Type

from sqlalchemy import Column, DateTime, Enum as SAEnum, Uuid, func
from sqlalchemy.orm import as_declarative, declared_attr

from comanda_digital.core.utils import utcnow


@as_declarative()
class Base:
    """
    Base class which provides automated table name
    and surrogate primary key column.
    """

    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    # Gerados no Python: a sessão assíncrona não precisa recarregar a linha após o flush
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)


def enum_column(enum_cls: Type[enum.Enum], **kwargs) -> SAEnum:
    """Enum persistido pelo valor ('active', 'cart'...) e não pelo nome do membro."""
    return SAEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        validate_strings=True,
        length=32,
        **kwargs,
    )
