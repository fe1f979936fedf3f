"""
アーキテクチャテスト

目的:
- 数値レイヤ（外側→内側のみ許可、同層は許可）
- 個別禁止エッジ（L0 内でも common/util はエンジンを知らない）
- モジュール間の import 循環なし
"""

from __future__ import annotations

import ast
import pathlib
from typing import Dict, Iterator, List, Optional, Set, Tuple

import pytest

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"

# レイヤ定義（数値が小さいほど内側）
# L0: Core/Base, L2: Render adapters, L3: API/Entry
LAYER_MAP = {
    ("common",): 0,
    ("util",): 0,
    ("engine", "core"): 0,
    ("engine", "render"): 2,
    ("api",): 3,
}

CHECK_ROOTS = {"api", "engine", "common", "util"}


def iter_py_files(root: pathlib.Path) -> Iterator[pathlib.Path]:
    for p in root.rglob("*.py"):
        if "__pycache__" in p.parts:
            continue
        yield p


def module_name_from_path(path: pathlib.Path) -> str:
    rel = path.relative_to(SRC_DIR).with_suffix("")
    parts = rel.parts[:-1] if rel.parts[-1] == "__init__" else rel.parts
    return ".".join(parts)


def _head(module: str) -> Tuple[str, Optional[str]]:
    parts = module.split(".") if module else []
    if not parts:
        return "", None
    return parts[0], parts[1] if len(parts) > 1 else None


def layer_of(module: str) -> Optional[int]:
    head, second = _head(module)
    if not head:
        return None
    key: tuple[str, ...] = (head, second) if head == "engine" and second else (head,)
    return LAYER_MAP.get(key)


def iter_import_edges(py_path: pathlib.Path) -> Iterator[Tuple[str, str]]:
    src_mod = module_name_from_path(py_path)
    is_pkg = py_path.name == "__init__.py"
    tree = ast.parse(py_path.read_text(encoding="utf-8"), filename=str(py_path))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield src_mod, alias.name
        elif isinstance(node, ast.ImportFrom):
            if node.level > 0:  # 相対 import
                parts = src_mod.split(".")
                drop = node.level - 1 if is_pkg else node.level
                base = ".".join(parts[: len(parts) - drop])
                mod = node.module or ""
                yield src_mod, f"{base}.{mod}" if mod else base
            else:
                yield src_mod, node.module or ""


def is_forbidden_edge(src: str, tgt: str) -> bool:
    s_head, _ = _head(src)
    t_head, _ = _head(tgt)
    # engine -> api は禁止
    if s_head == "engine" and t_head == "api":
        return True
    # common/util は engine/api を参照しない（同層 L0 でも基盤側に留める）
    if s_head in {"common", "util"} and t_head in {"engine", "api"}:
        return True
    return False


def collect_graph_and_violations() -> tuple[Dict[str, Set[str]], List[str], List[str]]:
    layering: List[str] = []
    forbidden: List[str] = []
    graph: Dict[str, Set[str]] = {}

    py_files = list(iter_py_files(SRC_DIR))
    for py in py_files:
        graph.setdefault(module_name_from_path(py), set())

    for py in py_files:
        for src, tgt in iter_import_edges(py):
            if _head(src)[0] not in CHECK_ROOTS or _head(tgt)[0] not in CHECK_ROOTS:
                continue
            s_layer, t_layer = layer_of(src), layer_of(tgt)
            if s_layer is not None and t_layer is not None and s_layer < t_layer:
                layering.append(f"[{py}] {src} (L{s_layer}) -> {tgt} (L{t_layer})")
            if is_forbidden_edge(src, tgt):
                forbidden.append(f"[{py}] {src} -> {tgt}")
            if tgt in graph and tgt != src:
                graph[src].add(tgt)
    return graph, layering, forbidden


def find_cycles(graph: Dict[str, Set[str]]) -> List[List[str]]:
    cycles: List[List[str]] = []
    state: Dict[str, int] = {u: 0 for u in graph}  # 0=未訪問, 1=探索中, 2=完了
    stack: List[str] = []

    def dfs(u: str) -> None:
        state[u] = 1
        stack.append(u)
        for v in sorted(graph.get(u, ())):
            if state[v] == 0:
                dfs(v)
            elif state[v] == 1:
                cycles.append(stack[stack.index(v):] + [v])
        stack.pop()
        state[u] = 2

    for node in sorted(graph):
        if state[node] == 0:
            dfs(node)
    return cycles


@pytest.mark.smoke
def test_architecture_import_rules():
    graph, layering, forbidden = collect_graph_and_violations()
    cycles = find_cycles(graph)
    msgs: List[str] = []
    if layering:
        msgs.append("Layer violations:\n" + "\n".join(layering))
    if forbidden:
        msgs.append("Forbidden-edge violations:\n" + "\n".join(forbidden))
    if cycles:
        msgs.append("Import cycles detected:\n" + "\n".join(" -> ".join(c) for c in cycles[:10]))
    if msgs:
        raise AssertionError("\n\n".join(msgs))
