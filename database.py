from typing import Dict, List, Optional

import dados
from models import Categoria, ItemCarrinho, Produto


class MemoryStore:
    """Armazenamento em memória, vive do start ao stop do processo.

    Sem persistência nem trava: requisições concorrentes no mesmo registro
    disputam livremente (vence a última escrita).
    """

    def __init__(self, categorias: Optional[List[Categoria]] = None,
                 produtos: Optional[List[Produto]] = None):
        self.categorias: List[Categoria] = categorias if categorias is not None else dados.categorias_iniciais()
        self.produtos: List[Produto] = produtos if produtos is not None else dados.produtos_iniciais()
        self.carrinho: Dict[str, ItemCarrinho] = {}


def init_db(app):
    """Cria o armazenamento da aplicação, se ainda não existir"""
    if getattr(app.state, "store", None) is None:
        app.state.store = MemoryStore()
    return app.state.store
