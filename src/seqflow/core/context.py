# src/seqflow/core/context.py
"""
Merge de contexto e resolução de caminhos do seqflow.

Este módulo define as regras canônicas pelas quais o contexto de um
pipeline evolui: cada Step devolve um *fragmento* e o Pipeline o combina
com o contexto corrente através de `merge_context`.

Política de merge:
    - mapping + mapping   → merge recursivo por chave
    - sequência + sequência → concatenação (base seguida do update)
    - qualquer outro caso → o valor do update substitui o da base
      (inclui callables, conflitos de tipo e chaves ausentes na base)
    - chaves presentes apenas na base são preservadas

Diferente do merge de configuração (`core.config.merge`), listas aqui
são acumuladas: Steps posteriores acrescentam itens, não os apagam.

Invariantes:
    - Nenhum input é mutado
    - Mappings e sequências do resultado são sempre containers novos
    - Valores-folha (inclusive callables) são compartilhados, não copiados

Limites explícitos:
    - Não valida tipos de domínio
    - Não conhece Steps nem Pipeline
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

Context = Dict[str, Any]
Fragment = Mapping[str, Any]


def _is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def _is_sequence(value: Any) -> bool:
    # str/bytes são escalares para fins de merge
    return isinstance(value, (list, tuple))


def copy_tree(value: Any) -> Any:
    """Copia estruturalmente mappings e sequências, preservando as folhas."""
    if _is_mapping(value):
        return {key: copy_tree(item) for key, item in value.items()}
    if isinstance(value, list):
        return [copy_tree(item) for item in value]
    if isinstance(value, tuple):
        return tuple(copy_tree(item) for item in value)
    return value


def _merge_value(base_value: Any, update_value: Any) -> Any:
    if _is_mapping(base_value) and _is_mapping(update_value):
        return merge_context(base_value, update_value)

    if _is_sequence(base_value) and _is_sequence(update_value):
        combined = [copy_tree(item) for item in base_value]
        combined.extend(copy_tree(item) for item in update_value)
        return tuple(combined) if isinstance(base_value, tuple) else combined

    return copy_tree(update_value)


def merge_context(base: Optional[Fragment], update: Optional[Fragment]) -> Context:
    """
    Combina um contexto base com um fragmento parcial, produzindo um novo contexto.

    A função é pura e determinística: `base` e `update` nunca são mutados,
    e o mesmo par de entradas produz sempre o mesmo resultado.

    Regras (avaliadas por chave de `update`, recursivamente):
        - ambos mappings → merge recursivo
        - ambos sequências (list/tuple) → concatenação `base + update`,
          mantendo o tipo de container da base
        - caso contrário → `update[k]` substitui `base[k]`

    Um `update` igual a `None` significa "nenhuma alteração" e devolve
    uma cópia estrutural da base.

    Args:
        base (Optional[Mapping[str, Any]]): Contexto corrente (ou None para vazio).
        update (Optional[Mapping[str, Any]]): Fragmento a ser incorporado.

    Returns:
        Dict[str, Any]: Novo contexto resultante do merge.

    Raises:
        TypeError: Se `base` ou `update` não forem mappings.
    """
    if base is None:
        base = {}
    if not _is_mapping(base):
        raise TypeError(f"Context base must be a mapping, got {type(base).__name__}")

    result: Context = copy_tree(base)
    if update is None:
        return result

    if not _is_mapping(update):
        raise TypeError(f"Context fragment must be a mapping, got {type(update).__name__}")

    for key, update_value in update.items():
        if key in result:
            result[key] = _merge_value(result[key], update_value)
        else:
            result[key] = copy_tree(update_value)

    return result


# -----------------------------
# Caminhos pontuados ("branch.leaf")
# -----------------------------
def split_path(path: str) -> List[str]:
    if not isinstance(path, str) or not path:
        raise ValueError("context path must be a non-empty string")
    segments = path.split(".")
    if any(not segment for segment in segments):
        raise ValueError(f"Invalid context path: '{path}'")
    return segments


_MISSING = object()


def _resolve(context: Any, path: str) -> Any:
    node = context
    for segment in split_path(path):
        if _is_mapping(node):
            if segment not in node:
                return _MISSING
            node = node[segment]
        elif _is_sequence(node):
            # apenas índices não negativos, em dígitos ("items.0")
            if not segment.isdecimal() or int(segment) >= len(node):
                return _MISSING
            node = node[int(segment)]
        else:
            return _MISSING
    return node


def has_path(context: Any, path: str) -> bool:
    """Indica se `path` resolve para uma chave presente (um valor None conta como presente)."""
    return _resolve(context, path) is not _MISSING


def get_path(context: Any, path: str, default: Any = None) -> Any:
    value = _resolve(context, path)
    return default if value is _MISSING else value
