"""Estado da personalização de um produto (o "modal" da loja).

Nada é gravado no carrinho até ``to_cart_item``; fechar a personalização
é só descartar o objeto.
"""
from typing import Dict, List, Optional

from catalogo import Grouped, available_sizes, topping_config
from models import Produto
from precos import LineItemPrice, clamp_quantity, compute_line_item


class ProductSelection:

    def __init__(self, produto: Produto):
        self.produto = produto
        self.size: Optional[str] = None
        self.quantity = 1
        self.config = topping_config(produto)
        # grupo -> nomes selecionados; formato simples usa a chave ""
        self.toppings: Dict[str, List[str]] = {}

    def choose_size(self, value: str):
        if any(s.value == value for s in available_sizes(self.produto)):
            self.size = value

    def toggle_topping(self, name: str, group_id: str = ""):
        """Marca/desmarca um acompanhamento.

        Em grupos, só adiciona enquanto o grupo estiver abaixo de
        ``maxSelections`` (limite ausente ou zero vale 1).
        """
        if isinstance(self.config, Grouped):
            group = next((g for g in self.config.groups if g.id == group_id), None)
            if group is None:
                return
            limit = group.max_selections or 1
        else:
            group_id = ""
            limit = None

        chosen = self.toppings.get(group_id, [])
        if name in chosen:
            self.toppings[group_id] = [t for t in chosen if t != name]
        elif limit is None or len(chosen) < limit:
            self.toppings[group_id] = chosen + [name]

    def count(self, group_id: str = "") -> int:
        return len(self.toppings.get(group_id, []))

    def increase(self):
        self.quantity += 1

    def decrease(self):
        self.quantity = clamp_quantity(self.quantity - 1)

    def selected_toppings(self) -> List[str]:
        if isinstance(self.config, Grouped):
            order = [g.id for g in self.config.groups]
        else:
            order = [""]
        return [name for gid in order for name in self.toppings.get(gid, [])]

    def price(self) -> LineItemPrice:
        return compute_line_item(self.produto, self.size, self.selected_toppings(), self.quantity)

    def can_add(self) -> bool:
        return not self.price().errors

    def to_cart_item(self) -> dict:
        """Payload para ``POST /api/cart``."""
        toppings = self.selected_toppings()
        return {
            "productId": self.produto.id,
            "productName": self.produto.name,
            "size": self.size,
            "price": self.price().unit_price,
            "quantity": self.quantity,
            "selectedToppings": toppings or None,
        }
