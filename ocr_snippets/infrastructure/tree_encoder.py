# ocr_snippets/infrastructure/tree_encoder.py

import json
import math
from typing import Any, Optional


def _replace_non_finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _replace_non_finite(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_replace_non_finite(item) for item in value]
    return value


def encode_output_tree(tree: Any, indent: Optional[int] = None) -> str:
    """
    Encode an output tree (or a list of them) as JSON.
    Key order is kept as is; NaN and infinite scores become null.
    """
    return json.dumps(
        _replace_non_finite(tree),
        indent=indent,
        ensure_ascii=False,
        allow_nan=False,
    )
