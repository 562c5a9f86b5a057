import math
from typing import Any, Dict, List

SCORE_FIELD = "confidenceScore"


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def validate_completion_payload(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    A completion payload carries exactly one variable: confidenceScore in [0, 1].
    """
    errors: List[str] = []

    if not isinstance(data, dict):
        return ["Payload must be a mapping"]

    if SCORE_FIELD not in data:
        errors.append(f"Missing required field: {SCORE_FIELD}")
    else:
        value = data[SCORE_FIELD]
        if not _is_number(value):
            errors.append(f"Field '{SCORE_FIELD}' must be a number")
        elif math.isnan(value) or math.isinf(value):
            errors.append(f"Field '{SCORE_FIELD}' must be finite")
        elif not 0.0 <= value <= 1.0:
            errors.append(f"Field '{SCORE_FIELD}' must be within [0, 1], got {value}")

    extra = sorted(k for k in data if k != SCORE_FIELD)
    if extra:
        errors.append(f"Unexpected fields: {', '.join(map(str, extra))}")

    return errors
