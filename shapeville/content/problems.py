from __future__ import annotations

"""Problem bank: the given questions each module variant asks.

Problems are content, not logic: a prompt, the correct answer (a number or
a label) and an optional worked solution, loaded from YAML and validated
with Pydantic.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, field_validator

from ..config.config import _load_yaml
from ..app.module_registry import ModuleMeta, list_modules


class Problem(BaseModel):
    module_id: str
    variant: str
    prompt: str
    answer: Union[float, str]
    unit: Optional[str] = None
    solution: Optional[str] = None

    @field_validator("answer")
    @classmethod
    def _non_empty_label(cls, v: Union[float, str]):
        if isinstance(v, str) and not v.strip():
            raise ValueError("label answers must not be empty")
        return v

    def answer_text(self) -> str:
        if isinstance(self.answer, str):
            return self.answer
        text = f"{self.answer:g}"
        return f"{text} {self.unit}" if self.unit else text


class ProblemBank:
    def __init__(self, problems: Iterable[Problem] = ()) -> None:
        self._by_key: Dict[Tuple[str, str], Problem] = {}
        for p in problems:
            self.add(p)

    def add(self, problem: Problem) -> None:
        self._by_key[(problem.module_id, problem.variant)] = problem

    def get(self, module_id: str, variant: str) -> Problem:
        try:
            return self._by_key[(module_id, str(variant))]
        except KeyError:
            raise KeyError(f"No problem for {module_id}/{variant}") from None

    def for_module(self, module_id: str) -> List[Problem]:
        return [p for (mid, _), p in self._by_key.items() if mid == module_id]

    def missing(self, meta: ModuleMeta) -> List[str]:
        """Variants of `meta` that have no problem in the bank."""
        return [v for v in meta.variants if (meta.id, v) not in self._by_key]

    def __len__(self) -> int:
        return len(self._by_key)


def _problem_from_entry(module_id: str, variant: str, entry: Any, answer_kind: str = "numeric") -> Problem:
    if entry is None or isinstance(entry, dict):
        data: Dict[str, Any] = dict(entry or {})
    else:
        data = {"answer": entry}
    data.setdefault("prompt", f"{module_id} {variant}")
    # Identification games answer with the variant's own name by default;
    # numeric problems without an answer fail validation.
    if answer_kind == "label":
        data.setdefault("answer", variant)
    return Problem(module_id=module_id, variant=str(variant), **data)


def load_problem_bank(path: Optional[str] = None) -> ProblemBank:
    """Load problems from YAML (`modules: {<module>: {<variant>: {...}}}`).

    Args:
        path: Optional path to a YAML problem file. If None, use the bundled bank.
    """
    p = Path(path) if path else Path(__file__).with_name("problems.yml")
    raw = _load_yaml(p)
    kinds = {m.id: m.answer_kind for m in list_modules()}
    bank = ProblemBank()
    for module_id, variants in (raw.get("modules", {}) or {}).items():
        kind = kinds.get(str(module_id), "numeric")
        for variant, entry in (variants or {}).items():
            bank.add(_problem_from_entry(str(module_id), str(variant), entry, kind))
    return bank
