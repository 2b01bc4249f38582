from __future__ import annotations

"""Answer parsing and comparison.

Numeric answers use an absolute tolerance, except that a zero-valued correct
answer only accepts an exact zero. Label answers (shape names, angle types)
compare after light normalization.
"""

import math
import re
from typing import Union

Answer = Union[float, str]


class InvalidAnswer(ValueError):
    """Raised when submitted text cannot be read as an answer."""


_SEPARATORS = re.compile(r"[\s_\-]+")
_LETTERS_ONLY = re.compile(r"[a-z ]+")


def parse_numeric(value: object) -> float:
    """Parse a submitted value as a finite float.

    Accepts ints, floats and numeric strings (surrounding whitespace ignored).
    Booleans, empty text, NaN and infinities are rejected.
    """
    if isinstance(value, bool):
        raise InvalidAnswer("booleans are not numeric answers")
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidAnswer("empty answer")
        try:
            num = float(text)
        except ValueError as e:
            raise InvalidAnswer(f"not a number: {value!r}") from e
    else:
        raise InvalidAnswer(f"unsupported answer type: {type(value).__name__}")
    if not math.isfinite(num):
        raise InvalidAnswer(f"not a finite number: {value!r}")
    return num


def normalize_label(value: object) -> str:
    if not isinstance(value, str):
        raise InvalidAnswer("label answers must be text")
    text = _SEPARATORS.sub(" ", value.strip().lower()).strip()
    if not text:
        raise InvalidAnswer("empty answer")
    if not _LETTERS_ONLY.fullmatch(text):
        raise InvalidAnswer(f"letters only: {value!r}")
    return text


def _strip_angle_suffix(label: str) -> str:
    if label.endswith(" angle"):
        return label[: -len(" angle")]
    return label


def numeric_matches(value: float, correct: float, tolerance: float) -> bool:
    if correct == 0:
        return value == 0
    return abs(value - correct) < tolerance


def label_matches(value: str, correct: str) -> bool:
    a = normalize_label(value)
    b = normalize_label(correct)
    return a == b or _strip_angle_suffix(a) == _strip_angle_suffix(b)


def check_answer(value: object, correct: Answer, tolerance: float) -> bool:
    """Return whether `value` answers `correct`.

    Raises InvalidAnswer when the value cannot be parsed; the caller decides
    whether that consumes an attempt (it never does for ExerciseSession).
    """
    if isinstance(correct, str):
        return label_matches(normalize_label(value), correct)
    return numeric_matches(parse_numeric(value), float(correct), tolerance)
