"""Modelo de catálogo: tamanhos, grupos de complementos e a configuração de
acompanhamentos de cada produto.

Um produto usa um de dois formatos de acompanhamentos:

* ``Grouped`` - grupos com itens de preço explícito (``toppingGroups``);
* ``FlatSplit`` - lista simples, onde os 5 primeiros são da faixa grátis
  e o restante é sempre cobrado.

Quando os dois estão preenchidos, o formato em grupos prevalece.
"""
import json
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from pydantic import ValidationError

from models import Produto, Tamanho, ToppingGroup

# Quantidade de acompanhamentos da faixa grátis (posição na lista do produto)
FREE_TOPPING_LIMIT = 5

DEFAULT_SIZES = [
    Tamanho(label="200ml", value="200ml", price=11.0),
    Tamanho(label="300ml", value="300ml", price=14.0),
    Tamanho(label="400ml", value="400ml", price=17.0),
    Tamanho(label="500ml", value="500ml", price=20.0),
    Tamanho(label="700ml", value="700ml", price=25.0),
]


@dataclass(frozen=True)
class Grouped:
    groups: List[ToppingGroup]

    def find_item(self, name: str):
        for group in self.groups:
            for item in group.items:
                if item.name == name:
                    return item
        return None


@dataclass(frozen=True)
class FlatSplit:
    toppings: List[str]

    @property
    def free_tier(self) -> List[str]:
        return self.toppings[:FREE_TOPPING_LIMIT]

    @property
    def paid_tier(self) -> List[str]:
        return self.toppings[FREE_TOPPING_LIMIT:]


ToppingConfig = Union[Grouped, FlatSplit]


def parse_topping_groups(payload: Optional[str]) -> List[ToppingGroup]:
    """Lê o JSON de grupos de complementos.

    Entrada malformada vira lista vazia: um cadastro quebrado não pode
    derrubar a exibição do produto.
    """
    if not payload:
        return []
    try:
        raw = json.loads(payload)
    except (TypeError, ValueError):
        logging.warning("toppingGroups inválido, ignorando: %r", payload[:80])
        return []
    if not isinstance(raw, list):
        return []
    try:
        return [ToppingGroup.model_validate(g) for g in raw]
    except ValidationError:
        logging.warning("toppingGroups com formato inesperado, ignorando")
        return []


def available_sizes(produto: Produto) -> List[Tamanho]:
    if not produto.sizes:
        return []
    return [s for s in DEFAULT_SIZES if s.value in produto.sizes]


def topping_config(produto: Produto) -> Optional[ToppingConfig]:
    groups = parse_topping_groups(produto.topping_groups)
    if groups:
        return Grouped(groups)
    if produto.toppings:
        return FlatSplit(list(produto.toppings))
    return None
