from typing import Iterable

from models import CamelModel, ItemCarrinho
from utils import format_price

# Taxa de entrega fixa, independente de distância ou peso
DELIVERY_FEE = 5.0


class CartSummary(CamelModel):
    subtotal: float
    delivery_fee: float
    total: float
    item_count: int
    total_display: str


def aggregate(items: Iterable[ItemCarrinho]) -> CartSummary:
    """Soma os itens do carrinho. Taxa de entrega fixa, só com subtotal > 0.

    ``item_count`` conta linhas do carrinho, não a soma das quantidades.
    """
    items = list(items)
    subtotal = sum(item.price * item.quantity for item in items)
    fee = DELIVERY_FEE if subtotal > 0 else 0.0
    total = round(subtotal + fee, 2)
    return CartSummary(
        subtotal=round(subtotal, 2),
        delivery_fee=round(fee, 2),
        total=total,
        item_count=len(items),
        total_display=format_price(total),
    )
