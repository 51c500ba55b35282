# src/compor_orcamento/utils/utils_num.py
from __future__ import annotations

import math
import re
from typing import Optional

_MOEDA = re.compile(r"^R\$", re.IGNORECASE)
_NUM_BR = re.compile(r"-?[0-9.,]+")


def parse_preco_br(x: object) -> Optional[float]:
    """
    Converte texto de preço em pt-BR/EN para float.
      "R$ 1.234,56" -> 1234.56
      "12,5"        -> 12.5
      "1234.56"     -> 1234.56
      "1e5"         -> 100000.0
      "-", "" ou lixo ("abc12", "12abc") -> None
    Números (int/float) passam direto; NaN e inteiros fora do alcance de float viram None.
    """
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, (int, float)):
        try:
            f = float(x)
        except OverflowError:
            return None
        return None if math.isnan(f) else f
    s = re.sub(r"\s+", "", str(x))
    s = _MOEDA.sub("", s)
    if s in ("", "-"):
        return None
    try:
        f = float(s)
    except ValueError:
        pass
    else:
        return f if math.isfinite(f) else None
    # só dígitos, sinal, '.' e ',' daqui em diante
    if not _NUM_BR.fullmatch(s):
        return None
    has_dot, has_comma = "." in s, "," in s
    if has_dot and has_comma:
        s = s.replace(".", "").replace(",", ".")  # . = milhar, , = decimal
    elif has_comma and not has_dot:
        s = s.replace(",", ".")                   # só vírgula -> decimal
    elif has_dot and s.count(".") > 1:
        s = s.replace(".", "")                    # "1.234.567" -> milhar
    try:
        return float(s)
    except ValueError:
        return None


def to_num(x: object, default: float = 0.0) -> float:
    """
    Valor numérico finito ou `default`.
    Campos de formulário vazios, None, NaN, infinito e lixo viram `default`.
    """
    if isinstance(x, bool):
        return float(x)
    if isinstance(x, (int, float)):
        try:
            f = float(x)
        except OverflowError:
            return default
    else:
        parsed = parse_preco_br(x)
        if parsed is None:
            return default
        f = parsed
    if math.isnan(f) or math.isinf(f):
        return default
    return f
