from __future__ import annotations

from typing import Any, Dict

GLOBAL_TYPE_PREFIX: str = "Prismic"

REPORTER_TEMPLATE: str = "cmsgraph({repository}) - {text}"

DEFAULT_IMGIX_PARAMS: Dict[str, Any] = {
    "auto": "compress,format",
    "fit": "max",
    "q": 50,
}

DEFAULT_PLACEHOLDER_IMGIX_PARAMS: Dict[str, Any] = {
    "w": 100,
    "blur": 15,
    "q": 20,
}

# Responsive variant widths, as multiples of the base width.
FLUID_WIDTH_FACTORS = (0.25, 0.5, 1, 1.5, 2, 3)
DEFAULT_FLUID_MAX_WIDTH: int = 800
