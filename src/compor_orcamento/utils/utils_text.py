from __future__ import annotations

import re
import unicodedata
import pandas as pd


def strip_accents(s: str) -> str:
    return unicodedata.normalize("NFKD", s).encode("ascii", "ignore").decode()


def norm_text(s: str | float | int | None) -> str:
    """
    Normaliza texto para comparações tolerantes:
    - converte para string
    - remove acentos
    - lower/casefold
    - remove pontuação/ruído
    - colapsa múltiplos espaços

    Usado só em diagnósticos e detecção de cabeçalho; a junção
    catálogo x kits x itens manuais continua por igualdade exata.
    """
    if not isinstance(s, str):
        s = "" if s is None or (isinstance(s, float) and pd.isna(s)) else str(s)
    s = strip_accents(s).casefold()
    s = re.sub(r"[^a-z0-9\s]", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def norm_header(s: object) -> str:
    """Cabeçalho de planilha: sem acento, maiúsculo, espaços colapsados."""
    if s is None or (isinstance(s, float) and pd.isna(s)):
        return ""
    s = strip_accents(str(s)).upper()
    return re.sub(r"\s+", " ", s).strip()
