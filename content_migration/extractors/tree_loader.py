"""
Conversão dos documentos JSON de origem em árvores de nós.

O CMS entrega duas representações da mesma página: o documento
``jcr:content.infinity.json`` (árvore do repositório) e o ``.model.json``
(árvore de componentes).  As funções deste módulo apenas convertem documentos
já carregados em :class:`RepositoryNode` / :class:`ComponentNode`; nós que não
são objetos são ignorados silenciosamente.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

from content_migration.models.trees import ComponentNode, RepositoryNode
from content_migration.utils.errors import InputTreeError

ITEMS_KEY = ":items"
ORDER_KEY = ":itemsOrder"
SECTION_KEY = "__jcrSection"


def _is_child_key(key: str) -> bool:
    """Chaves iniciadas por ``:`` são metadados estruturais, nunca filhos."""
    return bool(key) and not key.startswith(":")


def repository_tree_from_document(doc: Any, key: str = "jcr:content") -> Optional[RepositoryNode]:
    """Converte um documento do repositório em uma árvore de :class:`RepositoryNode`.

    Args:
        doc: Documento já decodificado (normalmente ``jcr:content.infinity.json``).
        key: Chave atribuída ao nó raiz.

    Returns:
        O nó raiz, ou ``None`` quando ``doc`` não é um objeto.
    """
    if not isinstance(doc, dict):
        return None
    properties: Dict[str, Any] = {}
    children: Dict[str, RepositoryNode] = {}
    for name, value in doc.items():
        if isinstance(value, dict):
            if not _is_child_key(name):
                continue
            child = repository_tree_from_document(value, name)
            if child is not None:
                children[name] = child
        else:
            properties[name] = value
    return RepositoryNode(key=key, properties=properties, children=children)


def _ordered_item_keys(items: Dict[str, Any], order: Any) -> List[str]:
    if isinstance(order, list) and order:
        return [k for k in order if isinstance(k, str) and k in items]
    return list(items.keys())


def component_tree_from_document(doc: Any, key: str = "root") -> Optional[ComponentNode]:
    """Converte um documento de modelo (``.model.json``) em :class:`ComponentNode`.

    Os filhos vêm de ``:items`` na ordem de ``:itemsOrder`` (ou na ordem do
    próprio documento quando a lista não existe).  O marcador ``__jcrSection``
    vira a proveniência de seção do nó.
    """
    if not isinstance(doc, dict):
        return None
    properties = {k: v for k, v in doc.items() if k not in (ITEMS_KEY, ORDER_KEY, SECTION_KEY)}
    children: Dict[str, ComponentNode] = {}
    items = doc.get(ITEMS_KEY)
    if isinstance(items, dict):
        for child_key in _ordered_item_keys(items, doc.get(ORDER_KEY)):
            if not _is_child_key(child_key):
                continue
            child = component_tree_from_document(items[child_key], child_key)
            if child is not None:
                children[child_key] = child
    section = doc.get(SECTION_KEY)
    return ComponentNode(
        key=key,
        properties=properties,
        children=children,
        section=section if isinstance(section, str) and section else None,
    )


def repository_root(tree: Optional[RepositoryNode]) -> Optional[RepositoryNode]:
    """Retorna o filho ``root`` do ``jcr:content`` quando existir."""
    if tree is None:
        return None
    return tree.child("root") or tree


def load_json_document(path: str) -> Dict[str, Any]:
    """Lê um arquivo JSON cujo conteúdo deve ser um objeto.

    Raises:
        InputTreeError: Se o arquivo não existir, não for JSON válido ou não
            contiver um objeto na raiz.
    """
    if not os.path.exists(path):
        raise InputTreeError(path, "file not found")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InputTreeError(path, f"invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise InputTreeError(path, "root is not a JSON object")
    return data
