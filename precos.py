"""Cálculo de preço de um item de pedido (produto + tamanho + acompanhamentos).

Política de tolerância: tamanho ou acompanhamento desconhecido não é erro.
Tamanho não reconhecido cai no preço base; acompanhamento não encontrado
custa zero. ``errors`` só traz avisos que bloqueiam o botão de adicionar.
"""
from typing import Iterable, List, Optional

from catalogo import FREE_TOPPING_LIMIT, FlatSplit, Grouped, available_sizes, topping_config
from models import CamelModel, Produto
from utils import format_price

# Valor cobrado por acompanhamento pago (ou grátis além do limite)
TOPPING_SURCHARGE = 2.0

ERRO_TAMANHO = "Selecione um tamanho"


class LineItemPrice(CamelModel):
    unit_price: float
    total_price: float
    total_display: str
    errors: List[str] = []


def clamp_quantity(quantity: Optional[int]) -> int:
    """Quantidade mínima é 1; não há máximo."""
    if not quantity or quantity < 1:
        return 1
    return int(quantity)


def base_price_for(produto: Produto, selected_size: Optional[str]) -> float:
    if produto.sizes and selected_size:
        for s in available_sizes(produto):
            if s.value == selected_size:
                return s.price
    return produto.base_price


def grouped_surcharge(config: Grouped, selected: Iterable[str]) -> float:
    total = 0.0
    for name in selected:
        item = config.find_item(name)
        if item is not None and item.price:
            total += item.price
    return total


def flat_surcharge(config: FlatSplit, selected: Iterable[str]) -> float:
    free_tier = config.free_tier
    paid_tier = config.paid_tier
    total = 0.0
    free_count = 0
    for name in selected:
        if name in paid_tier:
            total += TOPPING_SURCHARGE
        elif name in free_tier:
            free_count += 1
            if free_count > FREE_TOPPING_LIMIT:
                total += TOPPING_SURCHARGE
    return total


def toppings_surcharge(produto: Produto, selected: Iterable[str]) -> float:
    config = topping_config(produto)
    if isinstance(config, Grouped):
        return grouped_surcharge(config, selected)
    if isinstance(config, FlatSplit):
        return flat_surcharge(config, selected)
    return 0.0


def advisories(produto: Produto, selected_size: Optional[str], selected: List[str]) -> List[str]:
    errors = []
    if produto.sizes and not selected_size:
        errors.append(ERRO_TAMANHO)
    config = topping_config(produto)
    if isinstance(config, Grouped):
        for group in config.groups:
            names = {i.name for i in group.items}
            if group.required and not any(n in names for n in selected):
                errors.append(f"{group.title}: obrigatório selecionar pelo menos 1 item")
    return errors


def compute_line_item(produto: Produto, selected_size: Optional[str] = None,
                      selected_toppings: Optional[Iterable[str]] = None,
                      quantity: Optional[int] = 1) -> LineItemPrice:
    selected = list(selected_toppings or [])
    quantity = clamp_quantity(quantity)

    unit = base_price_for(produto, selected_size) + toppings_surcharge(produto, selected)
    total = round(unit * quantity, 2)
    return LineItemPrice(
        unit_price=round(unit, 2),
        total_price=total,
        total_display=format_price(total),
        errors=advisories(produto, selected_size, selected),
    )
