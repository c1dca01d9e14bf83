from __future__ import annotations

import random
import re
from dataclasses import dataclass
from typing import Optional

OPERAND_MIN = 1
OPERAND_MAX = 10

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Challenge:
    left: int
    right: int

    @property
    def prompt_text(self) -> str:
        return f"{self.left} × {self.right} = ?"

    @property
    def expected_answer(self) -> int:
        return self.left * self.right


def generate_challenge(rng: Optional[random.Random] = None) -> Challenge:
    """Draw a fresh multiplication problem with both operands in [1, 10]."""

    source = rng or random
    return Challenge(
        left=source.randint(OPERAND_MIN, OPERAND_MAX),
        right=source.randint(OPERAND_MIN, OPERAND_MAX),
    )


def parse_answer(text: str) -> Optional[int]:
    # digits only with an optional sign; no surrounding whitespace or underscores
    if not text or not _INTEGER_RE.fullmatch(text):
        return None
    return int(text)


def check_answer(text: str, expected: int) -> bool:
    answer = parse_answer(text)
    return answer is not None and answer == expected
