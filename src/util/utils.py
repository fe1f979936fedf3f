"""
どこで: `util.utils`。
何を: YAML 設定（`configs/default.yaml` + ルート `config.yaml`）の読込と節単位の取得。
なぜ: レーン寸法やループ FPS を、コード変更なしにリポジトリ単位で差し替えられるようにするため。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG = Path("configs") / "default.yaml"
OVERRIDE_CONFIG = Path("config.yaml")
_ROOT_MARKERS = (".git", "pyproject.toml", "configs")


def _safe_load_yaml(path: Path) -> Dict[str, Any]:
    """読めない/壊れている/トップレベルが dict でない YAML は空辞書として扱う。"""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def _find_project_root(start: Path) -> Path:
    """`start` から上へ辿り、`_ROOT_MARKERS` のいずれかを持つ最初のディレクトリ。

    見つからなければ `<start>/../..`（`<repo>/src/util` からの典型位置）。
    """
    cur = start.resolve()
    for parent in (cur, *cur.parents):
        if any((parent / marker).exists() for marker in _ROOT_MARKERS):
            return parent
    return cur.parent.parent


def load_config() -> Dict[str, Any]:
    """ベース設定にルート `config.yaml` を重ねた辞書を返す（フェイルソフト）。

    節（`lanes:` など）が両方で dict のときはキー単位で上書きし、
    それ以外のトップレベル値は丸ごと置き換える。
    """
    root = _find_project_root(Path(__file__).parent)
    merged: Dict[str, Any] = {}
    for rel in (DEFAULT_CONFIG, OVERRIDE_CONFIG):
        path = root / rel
        if not path.exists():
            continue
        for key, value in _safe_load_yaml(path).items():
            prev = merged.get(key)
            if isinstance(prev, dict) and isinstance(value, dict):
                merged[key] = {**prev, **value}
            else:
                merged[key] = value
    return merged


def config_section(name: str) -> Dict[str, Any]:
    """トップレベル節 `name` を辞書で返す（無い/不正なら空辞書）。"""
    section = load_config().get(name)
    return dict(section) if isinstance(section, dict) else {}


__all__ = ["load_config", "config_section"]
