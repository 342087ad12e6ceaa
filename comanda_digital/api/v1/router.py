from fastapi import APIRouter

from comanda_digital.api.v1.endpoints import (
    admin,
    assistance,
    cart,
    maintenance,
    manager,
    menu_items,
    notifications,
    orders,
    payments,
    sessions,
    splits,
    staff,
    tables,
)

api_router_v1 = APIRouter()

api_router_v1.include_router(tables.router, prefix="/tables", tags=["Mesas"])
api_router_v1.include_router(sessions.router, prefix="/sessions", tags=["Sessões"])
api_router_v1.include_router(cart.router, prefix="/cart", tags=["Carrinho"])
api_router_v1.include_router(orders.router, prefix="/orders", tags=["Pedidos"])
api_router_v1.include_router(splits.router, prefix="/splits", tags=["Divisão de Conta"])
api_router_v1.include_router(notifications.router, prefix="/notifications", tags=["Notificações"])
api_router_v1.include_router(assistance.router, tags=["Atendimento"])
api_router_v1.include_router(payments.router, prefix="/payment", tags=["Pagamentos"])
api_router_v1.include_router(staff.router, prefix="/staff", tags=["Equipe"])
api_router_v1.include_router(menu_items.router, prefix="/menu-items", tags=["Cardápio"])
api_router_v1.include_router(maintenance.router, tags=["Manutenção"])
api_router_v1.include_router(manager.router, prefix="/manager", tags=["Gerência"])
api_router_v1.include_router(admin.router, prefix="/admin", tags=["Administração"])
