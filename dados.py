import json

from models import Categoria, Produto

TODOS_TAMANHOS = ["200ml", "300ml", "400ml", "500ml", "700ml"]

ACOMPANHAMENTOS = [
    "Granola", "Leite em pó", "Banana", "Paçoca", "Leite condensado",
    "Morango", "Nutella", "Kiwi", "Bis",
]

_GRUPOS_BARCA = [
    {
        "id": "frutas",
        "title": "Frutas",
        "description": "Escolha até 2 frutas",
        "maxSelections": 2,
        "required": True,
        "items": [{"name": "Banana"}, {"name": "Morango"}, {"name": "Kiwi", "price": 3.0}],
    },
    {
        "id": "coberturas",
        "title": "Coberturas",
        "description": "Escolha 1 cobertura",
        "maxSelections": 1,
        "required": False,
        "items": [
            {"name": "Leite condensado"},
            {"name": "Chocolate"},
            {"name": "Nutella", "price": 5.0},
        ],
    },
    {
        "id": "extras",
        "title": "Extras",
        "description": "Turbine sua barca",
        "maxSelections": 3,
        "required": False,
        "items": [{"name": "Bis", "price": 2.5}, {"name": "Ovomaltine", "price": 3.0}, {"name": "Granola"}],
    },
]

CATEGORIAS = [
    Categoria(id="promocao", name="Promoções", order=0),
    Categoria(id="acai", name="Açaí", order=1),
    Categoria(id="sorvetes", name="Sorvetes", order=2),
    Categoria(id="milkshakes", name="Milkshakes", order=3),
    Categoria(id="barcas", name="Barcas", order=4),
]

PRODUTOS = [
    Produto(
        id="acai-tradicional",
        name="Açaí Tradicional",
        description="Açaí cremoso com até 5 acompanhamentos grátis",
        category_id="acai",
        base_price=11.0,
        is_featured=True,
        sizes=TODOS_TAMANHOS,
        toppings=ACOMPANHAMENTOS,
    ),
    Produto(
        id="acai-promo-500",
        name="Açaí 500ml em Dobro",
        description="Leve dois copos de 500ml pelo preço promocional",
        category_id="promocao",
        base_price=32.0,
        is_promotion=True,
        toppings=ACOMPANHAMENTOS,
    ),
    Produto(
        id="sorvete-casquinha",
        name="Casquinha",
        description="Sorvete de baunilha na casquinha",
        category_id="sorvetes",
        base_price=6.0,
    ),
    Produto(
        id="sorvete-pote",
        name="Sorvete no Pote",
        description="Sorvete artesanal no copo",
        category_id="sorvetes",
        base_price=12.0,
        sizes=["300ml", "500ml", "700ml"],
        toppings=ACOMPANHAMENTOS[:7],
    ),
    Produto(
        id="milkshake-morango",
        name="Milkshake de Morango",
        category_id="milkshakes",
        base_price=18.0,
        sizes=["400ml", "500ml"],
    ),
    Produto(
        id="barca-acai",
        name="Barca de Açaí",
        description="Barca para compartilhar, monte do seu jeito",
        category_id="barcas",
        base_price=45.0,
        is_featured=True,
        topping_groups=json.dumps(_GRUPOS_BARCA, ensure_ascii=False),
    ),
]


def categorias_iniciais():
    return [c.model_copy() for c in CATEGORIAS]


def produtos_iniciais():
    return [p.model_copy(deep=True) for p in PRODUTOS]
