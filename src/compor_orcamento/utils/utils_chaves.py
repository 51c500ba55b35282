# src/compor_orcamento/utils/utils_chaves.py
from __future__ import annotations

from typing import Any, Dict

from ..models import CAMEL_TO_SNAKE, SNAKE_TO_CAMEL


def _rename_keys(obj: Any, mapping: Dict[str, str]) -> Any:
    if isinstance(obj, dict):
        return {mapping.get(k, k): _rename_keys(v, mapping) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_rename_keys(v, mapping) for v in obj]
    return obj


def to_snake_keys(obj: Any) -> Any:
    """Registro persistido (camelCase) -> nomes internos. Chaves já em snake_case passam direto."""
    return _rename_keys(obj, CAMEL_TO_SNAKE)


def to_camel_keys(obj: Any) -> Any:
    """Nomes internos -> layout camelCase do registro persistido."""
    return _rename_keys(obj, SNAKE_TO_CAMEL)
