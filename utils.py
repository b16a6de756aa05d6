from typing import Iterable, Optional
from urllib.parse import quote

from config import STORE_NAME, WHATSAPP_NUMERO
from models import ItemCarrinho


def format_order(items: Iterable[ItemCarrinho], subtotal: float, delivery_fee: float, total: float) -> str:
    """Monta o texto do pedido enviado pelo WhatsApp.

    Cada item vira um parágrafo; o valor mostrado é preço unitário x quantidade.
    """
    linhas = []
    for item in items:
        texto = f"{item.quantity}x {item.product_name}"
        if item.size:
            texto += f" ({item.size})"
        if item.selected_toppings:
            texto += f"\nAcompanhamentos: {', '.join(item.selected_toppings)}"
        texto += f" - R$ {item.price * item.quantity:.2f}"
        linhas.append(texto)

    return (
        f"*Pedido {STORE_NAME}*\n\n"
        + "\n\n".join(linhas)
        + "\n\n---\n"
        + f"Subtotal: R$ {subtotal:.2f}\n"
        + f"Taxa de entrega: R$ {delivery_fee:.2f}\n"
        + f"*Total: R$ {total:.2f}*"
    )


def change_due(payment_method: str, needs_change: bool, change_amount: Optional[float], total: float) -> float:
    """Troco a devolver; só existe para pagamento em dinheiro com troco pedido."""
    if payment_method == "dinheiro" and needs_change and change_amount:
        return round(change_amount - total, 2)
    return 0.0


def gps_link(latitude: Optional[float], longitude: Optional[float]) -> str:
    if latitude is None or longitude is None:
        return ""
    return f"https://www.google.com/maps?q={latitude},{longitude}"


PAGAMENTOS = {"pix": "PIX", "cartao": "Cartão", "dinheiro": "Dinheiro"}


def delivery_block(checkout, total: float) -> str:
    """Dados de entrega e pagamento anexados ao fim da mensagem do pedido."""
    endereco = f"{checkout.rua}, {checkout.numero}"
    if checkout.quadra:
        endereco += f", Quadra {checkout.quadra}"
    if checkout.complemento:
        endereco += f" - {checkout.complemento}"

    linhas = [
        f"Cliente: {checkout.name}",
        f"Endereço: {endereco}",
        f"CEP: {checkout.cep}",
        f"Pagamento: {PAGAMENTOS.get(checkout.payment_method, checkout.payment_method)}",
    ]
    troco = change_due(checkout.payment_method, checkout.needs_change, checkout.change_amount, total)
    if checkout.payment_method == "dinheiro" and checkout.needs_change and checkout.change_amount:
        linhas.append(f"Troco para R$ {checkout.change_amount:.2f} (troco: R$ {troco:.2f})")
    link = checkout.gps_link or gps_link(checkout.latitude, checkout.longitude)
    if link:
        linhas.append(f"Localização: {link}")
    return "\n".join(linhas)


def whatsapp_link(texto: str = "") -> str:
    """Gera o link wa.me com o texto já codificado."""
    if not WHATSAPP_NUMERO:
        return '#'
    if not texto:
        return f"https://wa.me/{WHATSAPP_NUMERO}"
    return f"https://wa.me/{WHATSAPP_NUMERO}?text={quote(texto, safe='')}"


def format_price(valor: float) -> str:
    """Formato de moeda pt-BR. Ex.: 1234.5 -> 'R$ 1.234,50'"""
    sinal = "-" if valor < 0 else ""
    inteiro, centavos = f"{abs(valor):,.2f}".split(".")
    return f"{sinal}R$ {inteiro.replace(',', '.')},{centavos}"


# ----- Exibição da loja (/api/store) -----

def phone_display(numero: Optional[str] = None) -> str:
    """Número do WhatsApp da loja legível para o cliente.
    Ex.: 5565981041149 -> +55 (65) 98104-1149; fora do padrão brasileiro
    volta como '+<dígitos>'.
    """
    digitos = ''.join(ch for ch in (numero or WHATSAPP_NUMERO or '') if ch.isdigit())
    if not digitos:
        return ''
    if not (digitos.startswith('55') and len(digitos) >= 12):
        return '+' + digitos

    ddd, local = digitos[2:4], digitos[4:]
    if len(local) in (8, 9):
        local = f"{local[:-4]}-{local[-4:]}"
    return f"+55 ({ddd}) {local}"
