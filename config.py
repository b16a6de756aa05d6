import os
from dotenv import load_dotenv

load_dotenv()

# Loja
STORE_NAME = os.getenv("STORE_NAME", "Horizonte - Sorvete e Açaí")

# Admin (senha compartilhada; não é autenticação de verdade)
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "troque_essa_senha")
ADMIN_ENFORCE = os.getenv("ADMIN_ENFORCE", "false").strip().lower() in ("1", "true", "yes", "on")

# WhatsApp
WHATSAPP_NUMERO = os.getenv("WHATSAPP_NUMERO", "5565981041149")

# Logs
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "").split(",")
    if origin.strip()
]
if not CORS_ORIGINS:
    CORS_ORIGINS = ["*"]  # Padrão para desenvolvimento/teste local
