# comanda_digital/api/v1/endpoints/menu_items.py
import uuid
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud, schemas
from comanda_digital.api import deps
from comanda_digital.core.exceptions import NotFoundError
from comanda_digital.db.models.staff import Staff

router = APIRouter()


@router.get("/", response_model=schemas.ApiResponse[List[schemas.MenuItem]])
async def read_menu_items(db: AsyncSession = Depends(deps.get_db), category: Optional[str] = None) -> Any:
    """
    Cardápio: apenas itens disponíveis, opcionalmente filtrados por categoria.
    """
    items = await crud.menu_item.get_multi(db, category=category)
    return schemas.ApiResponse(data=[schemas.MenuItem.model_validate(i) for i in items])


@router.post("/", response_model=schemas.ApiResponse[schemas.MenuItem], status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    *,
    db: AsyncSession = Depends(deps.get_db),
    item_in: schemas.MenuItemCreate,
    current_staff: Staff = Depends(deps.get_current_manager),
) -> Any:
    item = await crud.menu_item.create(db, obj_in=item_in)
    await db.commit()
    return schemas.ApiResponse(data=schemas.MenuItem.model_validate(item), message="Item criado")


@router.get("/{item_id}", response_model=schemas.ApiResponse[schemas.MenuItem])
async def read_menu_item(item_id: uuid.UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    item = await crud.menu_item.get(db, item_id)
    if not item:
        raise NotFoundError("Item do cardápio não encontrado")
    return schemas.ApiResponse(data=schemas.MenuItem.model_validate(item))


@router.patch("/{item_id}", response_model=schemas.ApiResponse[schemas.MenuItem])
async def update_menu_item(
    *,
    db: AsyncSession = Depends(deps.get_db),
    item_id: uuid.UUID,
    item_in: schemas.MenuItemUpdate,
    current_staff: Staff = Depends(deps.get_current_manager),
) -> Any:
    item = await crud.menu_item.get(db, item_id)
    if not item:
        raise NotFoundError("Item do cardápio não encontrado")
    item = await crud.menu_item.update(db, db_obj=item, obj_in=item_in)
    await db.commit()
    return schemas.ApiResponse(data=schemas.MenuItem.model_validate(item), message="Item atualizado")
