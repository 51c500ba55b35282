# src/compor_orcamento/config.py
from __future__ import annotations

import os

# Padrões comerciais da empresa (podem ser sobrescritos pela CLI)
DEFAULT_BDI = 25.0
DEFAULT_MARGEM_LUCRO = 15.0
DEFAULT_VALIDADE_DIAS = 30
DEFAULT_CONDICOES_PAGAMENTO = "30 dias após aprovação"
DEFAULT_CRONOGRAMA = "15 dias úteis"

# Web-app da planilha (catálogo/kits). Vazio = sem acesso remoto.
SCRIPT_API_URL = os.environ.get("COMPOR_ORCAMENTO_SCRIPT_URL", "").strip()
SCRIPT_TIMEOUT = float(os.environ.get("COMPOR_ORCAMENTO_TIMEOUT", "15") or 15)

# Casas decimais usadas antes do arredondamento para cima das quantidades de kit
CASAS_QUANTIDADE = 9
