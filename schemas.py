from typing import List, Literal, Optional

from pydantic import Field, field_validator

from models import CamelModel


def _split_lista(valor):
    # O formulário do admin manda "a, b, c"; a API também aceita lista
    if isinstance(valor, str):
        itens = [v.strip() for v in valor.split(",") if v.strip()]
        return itens or None
    return valor


class ProdutoBase(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category_id: str = Field(..., min_length=1)
    base_price: float = Field(..., ge=0)
    image: Optional[str] = None
    is_promotion: bool = False
    is_featured: bool = False
    sizes: Optional[List[str]] = None
    toppings: Optional[List[str]] = None
    topping_groups: Optional[str] = None

    @field_validator("sizes", "toppings", mode="before")
    @classmethod
    def split_lista(cls, valor):
        return _split_lista(valor)


class ProdutoCreate(ProdutoBase):
    pass


class ProdutoUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    base_price: Optional[float] = Field(None, ge=0)
    image: Optional[str] = None
    is_promotion: Optional[bool] = None
    is_featured: Optional[bool] = None
    sizes: Optional[List[str]] = None
    toppings: Optional[List[str]] = None
    topping_groups: Optional[str] = None

    @field_validator("sizes", "toppings", mode="before")
    @classmethod
    def split_lista(cls, valor):
        return _split_lista(valor)


class ItemCarrinhoCreate(CamelModel):
    product_id: str
    product_name: str
    size: Optional[str] = None
    price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    selected_toppings: Optional[List[str]] = None


class ItemCarrinhoIn(CamelModel):
    """Pedido de inclusão no carrinho; o preço é recalculado no servidor
    quando o produto existe no catálogo."""
    product_id: str
    product_name: Optional[str] = None
    size: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    quantity: Optional[int] = 1
    selected_toppings: Optional[List[str]] = None


class PrecoRequest(CamelModel):
    size: Optional[str] = None
    selected_toppings: List[str] = []
    quantity: Optional[int] = 1


class CheckoutData(CamelModel):
    name: str = Field(..., min_length=1)
    rua: str = Field(..., min_length=1)
    numero: str = Field(..., min_length=1)
    quadra: Optional[str] = None
    complemento: Optional[str] = None
    cep: str = Field(..., min_length=8)
    payment_method: Literal["pix", "cartao", "dinheiro"]
    needs_change: bool = False
    change_amount: Optional[float] = Field(None, ge=0)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    gps_link: Optional[str] = None


class AdminLogin(CamelModel):
    password: str
