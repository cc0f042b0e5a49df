from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from cmsgraph.constants import DEFAULT_FLUID_MAX_WIDTH, FLUID_WIDTH_FACTORS

from .environment import NormalizationEnvironment

log = logging.getLogger("cmsgraph.normalization")

_IMAGE_KEYS = frozenset({"alt", "copyright", "dimensions", "url", "edit", "id"})


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_imgix_url(url: str, params: Mapping[str, Any]) -> str:
    """Merge transform parameters into an image URL's query string.

    Parameters already on the URL are kept unless overridden.
    """

    parts = urlsplit(url)
    query: Dict[str, str] = dict(parse_qsl(parts.query, keep_blank_values=True))
    for key, value in params.items():
        if value is None:
            continue
        query[str(key)] = _param_value(value)
    return urlunsplit(parts._replace(query=urlencode(query, safe=",")))


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    return None


def build_fluid(
    url: str,
    width: Optional[int],
    height: Optional[int],
    params: Mapping[str, Any],
    *,
    max_width: int = DEFAULT_FLUID_MAX_WIDTH,
) -> Dict[str, Any]:
    """Describe responsive variants of an image for a parameter set.

    Variant widths never exceed the source width.
    """

    base = min(max_width, width) if width else max_width
    aspect_ratio = (width / height) if width and height else None

    widths: List[int] = sorted(
        {int(round(base * f)) for f in FLUID_WIDTH_FACTORS if not width or base * f <= width}
    )
    widths = [w for w in widths if w > 0] or [base]

    srcset = ", ".join(f"{build_imgix_url(url, {**params, 'w': w})} {w}w" for w in widths)

    return {
        "src": build_imgix_url(url, {**params, "w": base}),
        "srcset": srcset,
        "sizes": f"(min-width: {base}px) {base}px, 100vw",
        "aspect_ratio": aspect_ratio,
        "width": base,
        "height": int(round(base / aspect_ratio)) if aspect_ratio else None,
    }


def _empty_image() -> Dict[str, Any]:
    return {
        "alt": None,
        "copyright": None,
        "dimensions": None,
        "url": None,
        "raw_url": None,
        "fluid": None,
        "placeholder": None,
        "thumbnails": {},
    }


def normalize_image(value: Any, path: Sequence[str], env: NormalizationEnvironment) -> Any:
    """Normalize an image field into full and placeholder representations.

    Thumbnails (extra image-shaped keys on the field) are normalized the
    same way and collected under ``thumbnails``.
    """

    if not isinstance(value, Mapping):
        return value

    url = value.get("url")
    if not isinstance(url, str) or not url:
        return _empty_image()

    dims = value.get("dimensions") if isinstance(value.get("dimensions"), Mapping) else {}
    width = _positive_int(dims.get("width"))
    height = _positive_int(dims.get("height"))

    placeholder_params = dict(env.placeholder_image_params)
    placeholder_width = _positive_int(placeholder_params.get("w")) or DEFAULT_FLUID_MAX_WIDTH

    thumbnails: Dict[str, Any] = {}
    for key, thumb in value.items():
        if key in _IMAGE_KEYS or not isinstance(thumb, Mapping) or "url" not in thumb:
            continue
        name = env.transform_field_name(str(key))
        thumbnails[name] = normalize_image(thumb, list(path) + [name], env)

    out: Dict[str, Any] = {
        "alt": value.get("alt"),
        "copyright": value.get("copyright"),
        "dimensions": {"width": width, "height": height} if dims else None,
        "url": url,
        "raw_url": url,
        "fluid": None,
        "placeholder": None,
        "thumbnails": thumbnails,
    }

    try:
        out["url"] = build_imgix_url(url, env.image_params)
        out["fluid"] = build_fluid(url, width, height, env.image_params)
        out["placeholder"] = {
            "url": build_imgix_url(url, placeholder_params),
            "fluid": build_fluid(url, width, height, placeholder_params, max_width=placeholder_width),
        }
    except ValueError as e:
        # urlsplit rejects malformed URLs; keep the raw URL without variants.
        log.debug("malformed image url at %s: %s", ".".join(path), e)
        out["url"] = url
        out["fluid"] = None
        out["placeholder"] = None

    return out
