from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base comum: JSON em camelCase, atributos Python em snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Categoria(CamelModel):
    id: str
    name: str
    order: int = 0


class Tamanho(CamelModel):
    label: str
    value: str
    price: float


class ToppingItem(CamelModel):
    name: str
    price: Optional[float] = None


class ToppingGroup(CamelModel):
    id: str
    title: str
    description: str = ""
    max_selections: int = 1
    required: bool = False
    items: List[ToppingItem] = []


class Produto(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    category_id: str
    base_price: float
    image: Optional[str] = None
    is_promotion: bool = False
    is_featured: bool = False
    sizes: Optional[List[str]] = None
    toppings: Optional[List[str]] = None
    topping_groups: Optional[str] = None  # JSON serializado de ToppingGroup[]


class ItemCarrinho(CamelModel):
    id: str
    product_id: str
    product_name: str
    size: Optional[str] = None
    price: float  # preço unitário final (tamanho + adicionais)
    quantity: int = 1
    selected_toppings: Optional[List[str]] = None
