import uuid

import schemas
from database import MemoryStore
from models import ItemCarrinho, Produto


def get_categorias(db: MemoryStore):
    return sorted(db.categorias, key=lambda c: c.order)

def get_produtos(db: MemoryStore, category_id: str = None, busca: str = None):
    produtos = db.produtos
    if category_id:
        produtos = [p for p in produtos if p.category_id == category_id]
    if busca:
        termo = busca.lower()
        produtos = [
            p for p in produtos
            if termo in p.name.lower() or termo in (p.description or "").lower()
        ]
    return list(produtos)

def get_produto(db: MemoryStore, produto_id: str):
    return next((p for p in db.produtos if p.id == produto_id), None)

def create_produto(db: MemoryStore, produto: schemas.ProdutoCreate):
    db_produto = Produto(id=str(uuid.uuid4()), **produto.model_dump())
    db.produtos.append(db_produto)
    return db_produto

def update_produto(db: MemoryStore, produto_id: str, produto: schemas.ProdutoUpdate):
    """Aplica só os campos enviados; o resultado passa pela validação de
    ``Produto`` (levanta ``ValidationError`` e não altera o catálogo)."""
    for i, atual in enumerate(db.produtos):
        if atual.id == produto_id:
            dados = {**atual.model_dump(), **produto.model_dump(exclude_unset=True), "id": atual.id}
            db.produtos[i] = Produto.model_validate(dados)
            return db.produtos[i]
    return None

def delete_produto(db: MemoryStore, produto_id: str):
    db.produtos = [p for p in db.produtos if p.id != produto_id]

def get_carrinho(db: MemoryStore):
    return list(db.carrinho.values())

def add_item_carrinho(db: MemoryStore, item: schemas.ItemCarrinhoCreate):
    db_item = ItemCarrinho(id=str(uuid.uuid4()), **item.model_dump())
    db.carrinho[db_item.id] = db_item
    return db_item

def remove_item_carrinho(db: MemoryStore, item_id: str):
    db.carrinho.pop(item_id, None)

def clear_carrinho(db: MemoryStore):
    db.carrinho.clear()
