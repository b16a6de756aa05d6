import hashlib
import hmac
import logging
import secrets
import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

import crud
import schemas
from carrinho import DELIVERY_FEE, CartSummary, aggregate
from config import ADMIN_ENFORCE, ADMIN_PASSWORD, CORS_ORIGINS, LOG_LEVEL, STORE_NAME
from catalogo import available_sizes
from database import MemoryStore, init_db
from models import CamelModel, Categoria, ItemCarrinho, Produto
from precos import LineItemPrice, clamp_quantity, compute_line_item
from utils import change_due, delivery_block, format_order, phone_display, whatsapp_link

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = init_db(app)
    logging.info("Catálogo carregado: %d categorias, %d produtos", len(store.categorias), len(store.produtos))
    yield


app = FastAPI(title="Horizonte - Sorvete e Açaí", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Erros inesperados: log completo, resposta genérica em JSON
@app.exception_handler(Exception)
async def erro_inesperado(request: Request, exc: Exception):
    logging.error("Erro inesperado em %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"detail": "Internal server error"}, status_code=500)


# Store dependency
def get_db(request: Request) -> MemoryStore:
    return init_db(request.app)


class CheckoutResponse(CamelModel):
    message: str
    url: str
    change_due: float
    summary: CartSummary


class LojaInfo(CamelModel):
    name: str
    whatsapp_link: str
    phone_display: str
    delivery_fee: float


# ----- Loja -----

@app.get("/api/store", response_model=LojaInfo)
def api_store():
    return LojaInfo(
        name=STORE_NAME,
        whatsapp_link=whatsapp_link(),
        phone_display=phone_display(),
        delivery_fee=DELIVERY_FEE,
    )


# ----- Catálogo -----

@app.get("/api/categories", response_model=List[Categoria])
def api_categories(db: MemoryStore = Depends(get_db)):
    try:
        return crud.get_categorias(db)
    except Exception:
        logging.exception("Erro ao buscar categorias")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")

@app.get("/api/products", response_model=List[Produto])
def api_products(categoryId: Optional[str] = None, q: Optional[str] = None, db: MemoryStore = Depends(get_db)):
    try:
        return crud.get_produtos(db, category_id=categoryId, busca=q)
    except Exception:
        logging.exception("Erro ao buscar produtos")
        raise HTTPException(status_code=500, detail="Failed to fetch products")

@app.get("/api/products/{produto_id}", response_model=Produto)
def api_product(produto_id: str, db: MemoryStore = Depends(get_db)):
    produto = crud.get_produto(db, produto_id)
    if not produto:
        raise HTTPException(status_code=404, detail="Product not found")
    return produto

@app.post("/api/products/{produto_id}/price", response_model=LineItemPrice)
def api_product_price(produto_id: str, req: schemas.PrecoRequest, db: MemoryStore = Depends(get_db)):
    produto = crud.get_produto(db, produto_id)
    if not produto:
        raise HTTPException(status_code=404, detail="Product not found")
    return compute_line_item(produto, req.size, req.selected_toppings, req.quantity)


# ----- Carrinho -----

@app.get("/api/cart", response_model=List[ItemCarrinho])
def api_cart(db: MemoryStore = Depends(get_db)):
    try:
        return crud.get_carrinho(db)
    except Exception:
        logging.exception("Erro ao buscar carrinho")
        raise HTTPException(status_code=500, detail="Failed to fetch cart")

@app.get("/api/cart/summary", response_model=CartSummary)
def api_cart_summary(db: MemoryStore = Depends(get_db)):
    return aggregate(crud.get_carrinho(db))

@app.post("/api/cart", response_model=ItemCarrinho, status_code=status.HTTP_201_CREATED)
def api_cart_add(item: schemas.ItemCarrinhoIn, db: MemoryStore = Depends(get_db)):
    produto = crud.get_produto(db, item.product_id)
    if produto:
        preco = compute_line_item(produto, item.size, item.selected_toppings, item.quantity)
        if preco.errors:
            raise HTTPException(status_code=400, detail={"error": "Invalid cart item data", "errors": preco.errors})
        # Tamanho só fica registrado se for um dos tamanhos do produto
        tamanhos = [s.value for s in available_sizes(produto)]
        tamanho = item.size if item.size in tamanhos else None
        novo = schemas.ItemCarrinhoCreate(
            product_id=produto.id,
            product_name=produto.name,
            size=tamanho,
            price=preco.unit_price,
            quantity=clamp_quantity(item.quantity),
            selected_toppings=item.selected_toppings or None,
        )
    else:
        # Produto fora do catálogo: aceita o snapshot enviado pelo cliente
        if item.product_name is None or item.price is None:
            raise HTTPException(status_code=400, detail="Invalid cart item data")
        novo = schemas.ItemCarrinhoCreate(
            product_id=item.product_id,
            product_name=item.product_name,
            size=item.size,
            price=item.price,
            quantity=clamp_quantity(item.quantity),
            selected_toppings=item.selected_toppings or None,
        )

    try:
        criado = crud.add_item_carrinho(db, novo)
    except Exception:
        logging.exception("Erro ao adicionar ao carrinho")
        raise HTTPException(status_code=500, detail="Failed to add item")
    logging.info("Carrinho: +%dx %s a R$ %.2f", criado.quantity, criado.product_name, criado.price)
    return criado

@app.delete("/api/cart/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_cart_remove(item_id: str, db: MemoryStore = Depends(get_db)):
    try:
        crud.remove_item_carrinho(db, item_id)
    except Exception:
        logging.exception("Erro ao remover item do carrinho")
        raise HTTPException(status_code=500, detail="Failed to remove item")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@app.delete("/api/cart", status_code=status.HTTP_204_NO_CONTENT)
def api_cart_clear(db: MemoryStore = Depends(get_db)):
    try:
        crud.clear_carrinho(db)
    except Exception:
        logging.exception("Erro ao limpar carrinho")
        raise HTTPException(status_code=500, detail="Failed to clear cart")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----- Checkout (WhatsApp) -----

@app.post("/api/checkout", response_model=CheckoutResponse)
def api_checkout(dados: schemas.CheckoutData, db: MemoryStore = Depends(get_db)):
    itens = crud.get_carrinho(db)
    if not itens:
        raise HTTPException(status_code=400, detail="Cart is empty")

    resumo = aggregate(itens)
    mensagem = format_order(itens, resumo.subtotal, resumo.delivery_fee, resumo.total)
    mensagem += "\n\n" + delivery_block(dados, resumo.total)
    return CheckoutResponse(
        message=mensagem,
        url=whatsapp_link(mensagem),
        change_due=change_due(dados.payment_method, dados.needs_change, dados.change_amount, resumo.total),
        summary=resumo,
    )


# ----- Admin -----
# Senha compartilhada, sem fronteira real de autorização. A exigência do
# token nas rotas de admin só vale com ADMIN_ENFORCE ligado.

ADMIN_USER = "admin"

# token helpers (HMAC of username:timestamp)
def _create_admin_token(username: str) -> str:
    ts = str(int(time.time()))
    data = f"{username}:{ts}"
    sig = hmac.new(ADMIN_PASSWORD.encode(), data.encode(), hashlib.sha256).hexdigest()
    return f"{data}:{sig}"

def _verify_admin_token(token: str, max_age: int = 86400) -> bool:
    parts = token.split(":")
    if len(parts) != 3:
        return False
    username, ts, sig = parts
    data = f"{username}:{ts}"
    expected = hmac.new(ADMIN_PASSWORD.encode(), data.encode(), hashlib.sha256).hexdigest()
    if not hmac.compare_digest(expected.encode(), sig.encode()):
        return False
    if username != ADMIN_USER or not ts.isdigit():
        return False
    return int(time.time()) - int(ts) <= max_age

def verify_admin(request: Request):
    if not ADMIN_ENFORCE:
        return True

    token = request.cookies.get("admin_token")
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        token = auth[len("Bearer "):]
    if token and _verify_admin_token(token):
        return True

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

@app.post("/api/admin/login")
def admin_login(login: schemas.AdminLogin, response: Response):
    if not secrets.compare_digest(login.password.encode(), ADMIN_PASSWORD.encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciais inválidas")
    token = _create_admin_token(ADMIN_USER)
    response.set_cookie("admin_token", token, httponly=True, samesite="lax", max_age=86400, path="/")
    return {"token": token}

@app.post("/api/admin/products", response_model=Produto, status_code=status.HTTP_201_CREATED)
def admin_create(produto: schemas.ProdutoCreate, db: MemoryStore = Depends(get_db), ok: bool = Depends(verify_admin)):
    p = crud.create_produto(db, produto)
    logging.info("Admin: produto criado %s (%s)", p.id, p.name)
    return p

@app.put("/api/admin/products/{produto_id}", response_model=Produto)
def admin_update(produto_id: str, produto: schemas.ProdutoUpdate, db: MemoryStore = Depends(get_db), ok: bool = Depends(verify_admin)):
    try:
        p = crud.update_produto(db, produto_id, produto)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_input=False, include_context=False))
    if not p:
        raise HTTPException(404, "Product not found")
    logging.info("Admin: produto atualizado %s", produto_id)
    return p

@app.delete("/api/admin/products/{produto_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete(produto_id: str, db: MemoryStore = Depends(get_db), ok: bool = Depends(verify_admin)):
    crud.delete_produto(db, produto_id)
    logging.info("Admin: produto removido %s", produto_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
