"""
Input validation for recommendation requests.

Pure functions checking the shape and bounds of the domain, seeds and count
sent by the client. Seed validation collects every applicable message so the
UI can show them all at once; array-level problems return immediately.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from recommender.schemas.recommendations import Seed
from recommender.utils.constants import (
    MAX_COUNT,
    MAX_SEEDS,
    MAX_TITLE_LENGTH,
    MIN_COUNT,
    MIN_TITLE_LENGTH,
    Domain,
)

# Code points with emoji presentation, plus the joiners and modifiers that glue them together
_EMOJI_CHARS = (
    "\xa9\xae\U0000203c\U00002049\U00002122\U00002139"
    "\U00002194-\U00002199\U000021a9\U000021aa"
    "\U0000231a\U0000231b\U00002328\U000023cf\U000023e9-\U000023f3\U000023f8-\U000023fa"
    "\U000024c2\U000025aa\U000025ab\U000025b6\U000025c0\U000025fb-\U000025fe"
    "\U00002600-\U00002604\U0000260e\U00002611\U00002614\U00002615\U00002618\U0000261d"
    "\U00002620\U00002622\U00002623\U00002626\U0000262a\U0000262e\U0000262f"
    "\U00002638-\U0000263a\U00002640\U00002642\U00002648-\U00002653\U0000265f\U00002660"
    "\U00002663\U00002665\U00002666\U00002668\U0000267b\U0000267e\U0000267f"
    "\U00002692-\U00002697\U00002699\U0000269b\U0000269c\U000026a0\U000026a1\U000026a7"
    "\U000026aa\U000026ab\U000026b0\U000026b1\U000026bd\U000026be\U000026c4\U000026c5"
    "\U000026c8\U000026ce\U000026cf\U000026d1\U000026d3\U000026d4\U000026e9\U000026ea"
    "\U000026f0-\U000026f5\U000026f7-\U000026fa\U000026fd"
    "\U00002702\U00002705\U00002708-\U0000270d\U0000270f\U00002712\U00002714\U00002716"
    "\U0000271d\U00002721\U00002728\U00002733\U00002734\U00002744\U00002747\U0000274c"
    "\U0000274e\U00002753-\U00002755\U00002757\U00002763\U00002764\U00002795-\U00002797"
    "\U000027a1\U000027b0\U000027bf\U00002934\U00002935\U00002b05-\U00002b07"
    "\U00002b1b\U00002b1c\U00002b50\U00002b55\U00003030\U0000303d\U00003297\U00003299"
    "\U0001f000-\U0001faff"
    "\U0000200d\U000020e3\U0000fe0e\U0000fe0f"
    "\U000e0020-\U000e007f"
)

# Keycap sequences (0-9, # or * followed by U+20E3) count as emoji; bare digits do not
_EMOJI_ONLY_RE = re.compile(
    "^(?:[\\s" + _EMOJI_CHARS + "]|[0-9#*]\U0000fe0f?\U000020e3)+$"
)

_DOMAIN_VALUES = tuple(domain.value for domain in Domain)


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass
class CountValidationResult:
    valid: bool
    value: Optional[int] = None
    error: Optional[str] = None


def validate_domain(value: Any) -> bool:
    """True iff value is exactly one of the recognized domain tags."""
    return isinstance(value, str) and value in _DOMAIN_VALUES


def is_emoji_only(text: str) -> bool:
    return bool(_EMOJI_ONLY_RE.match(text))


def validate_seed_title(title: Any) -> bool:
    """
    Check a single seed title.

    Examples:
        - "Great Song 🎵" -> True
        - "😀😃😄" -> False
        - "A" -> False
    """
    if not isinstance(title, str):
        return False
    trimmed = title.strip()
    if len(trimmed) < MIN_TITLE_LENGTH or len(trimmed) > MAX_TITLE_LENGTH:
        return False
    return not is_emoji_only(trimmed)


def validate_seeds(value: Any) -> ValidationResult:
    """
    Validate the seeds array of a request.

    Every seed is checked even after an earlier one fails, and each message
    is prefixed with the 1-based seed index ("Seed 2: Title is required").
    """
    if not isinstance(value, list):
        return ValidationResult(valid=False, errors=["Seeds must be an array"])

    if len(value) == 0:
        return ValidationResult(valid=False, errors=["At least one seed is required"])

    if len(value) > MAX_SEEDS:
        return ValidationResult(valid=False, errors=[f"Maximum {MAX_SEEDS} seeds allowed"])

    errors: List[str] = []

    for index, seed in enumerate(value, start=1):
        prefix = f"Seed {index}"

        if not isinstance(seed, Mapping):
            errors.append(f"{prefix}: Must be an object")
            continue

        raw_title = seed.get("title")
        if raw_title is not None and not isinstance(raw_title, str):
            errors.append(f"{prefix}: Title must be a string")
        else:
            title = (raw_title or "").strip()
            if not title:
                errors.append(f"{prefix}: Title is required")
            elif len(title) < MIN_TITLE_LENGTH:
                errors.append(f"{prefix}: Title must be at least {MIN_TITLE_LENGTH} characters")
            elif len(title) > MAX_TITLE_LENGTH:
                errors.append(f"{prefix}: Title must be less than {MAX_TITLE_LENGTH} characters")
            elif is_emoji_only(title):
                errors.append(f"{prefix}: Title cannot be only emojis")

        by = seed.get("by")
        if by is not None and not isinstance(by, str):
            errors.append(f"{prefix}: By field must be a string")

    return ValidationResult(valid=len(errors) == 0, errors=errors)


def validate_count(value: Any) -> CountValidationResult:
    """
    Validate the requested number of recommendations.

    Numeric strings such as "10" are coerced; the coerced integer is returned
    in `value` when valid.
    """
    if isinstance(value, bool) or value is None:
        return CountValidationResult(valid=False, error="Count must be a number")

    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return CountValidationResult(valid=False, error="Count must be a number")

    if not isinstance(value, (int, float)) or (isinstance(value, float) and math.isnan(value)):
        return CountValidationResult(valid=False, error="Count must be a number")

    if isinstance(value, float) and not value.is_integer():
        return CountValidationResult(valid=False, error="Count must be an integer")

    if value < MIN_COUNT:
        return CountValidationResult(valid=False, error=f"Count must be at least {MIN_COUNT}")

    if value > MAX_COUNT:
        return CountValidationResult(valid=False, error=f"Count must be at most {MAX_COUNT}")

    return CountValidationResult(valid=True, value=int(value))


def normalize_seed(seed: Mapping[str, Any]) -> Seed:
    """Trim the title and `by`; a blank `by` becomes absent."""
    by = seed.get("by")
    by = by.strip() if isinstance(by, str) else None
    return Seed(title=seed["title"].strip(), by=by or None)
