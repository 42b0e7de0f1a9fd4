"""
URLs de imágenes de propiedades.

Genera URLs confiables (Unsplash Source, Picsum, placehold.co) y
ajusta el tamaño de URLs existentes según el contexto de uso.
"""

import re
from typing import Optional, Union
from urllib.parse import quote, urlencode, urlparse, parse_qsl, urlunparse

from mirador.config import PROPERTY_TYPE_KEYWORDS

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600

# Presets de tamaño por contexto de la UI
IMAGE_SIZES = {
    "card": (400, 300),
    "detail": (800, 500),
    "fullscreen": (1200, 675),
    "thumbnail": (200, 150),
}

_VALID_PATTERNS = [
    re.compile(r"^https?://.*\.(jpg|jpeg|png|gif|webp)", re.IGNORECASE),
    re.compile(r"^https?://.*unsplash\.com", re.IGNORECASE),
    re.compile(r"^https?://.*picsum\.photos", re.IGNORECASE),
    re.compile(r"^https?://.*placehold\.co", re.IGNORECASE),
]

_UNSPLASH_SIZE_RE = re.compile(r"source\.unsplash\.com/\d+x\d+")
_PICSUM_SEED_RE = re.compile(r"picsum\.photos/seed/([^/]+)/\d+/\d+")
_PICSUM_SIZE_RE = re.compile(r"picsum\.photos/\d+/\d+")


def unsplash_source_url(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    keyword: Optional[str] = None,
) -> str:
    return f"https://source.unsplash.com/{width}x{height}/?{quote(keyword or 'building', safe='')}"


def property_image_url(
    property_type: Optional[str],
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> str:
    """URL de imagen acorde al tipo de propiedad (Office, Industrial, ...)."""
    keyword = PROPERTY_TYPE_KEYWORDS.get(property_type or "", "commercial building")
    return unsplash_source_url(width, height, keyword)


def picsum_image_url(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    seed: Optional[Union[str, int]] = None,
) -> str:
    """Imagen de Picsum; con `seed` (ej. el id) siempre devuelve la misma."""
    if seed:
        return f"https://picsum.photos/seed/{seed}/{width}/{height}"
    return f"https://picsum.photos/{width}/{height}"


def placeholder_image_url(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    text: Optional[str] = None,
) -> str:
    if text:
        return f"https://placehold.co/{width}x{height}?text={quote(text, safe='')}"
    return f"https://placehold.co/{width}x{height}"


def is_valid_image_url(url) -> bool:
    if not url or not isinstance(url, str):
        return False
    return any(pattern.search(url) for pattern in _VALID_PATTERNS)


def fallback_image_url(property_type: Optional[str] = None) -> str:
    return property_image_url(property_type or "Office", DEFAULT_WIDTH, DEFAULT_HEIGHT)


def optimize_image_url(url: str, width: int, height: int) -> str:
    """
    Ajusta el tamaño de una URL de Unsplash o Picsum.

    Otras URLs se devuelven sin cambios.
    """
    if not url:
        return url

    if "source.unsplash.com" in url:
        if _UNSPLASH_SIZE_RE.search(url):
            return _UNSPLASH_SIZE_RE.sub(f"source.unsplash.com/{width}x{height}", url, count=1)
        return url.replace("source.unsplash.com/", f"source.unsplash.com/{width}x{height}/", 1)

    if "picsum.photos" in url:
        seed_match = _PICSUM_SEED_RE.search(url)
        if seed_match:
            return _PICSUM_SEED_RE.sub(
                f"picsum.photos/seed/{seed_match.group(1)}/{width}/{height}", url, count=1
            )
        if _PICSUM_SIZE_RE.search(url):
            return _PICSUM_SIZE_RE.sub(f"picsum.photos/{width}/{height}", url, count=1)
        return url

    if "images.unsplash.com" in url:
        parsed = urlparse(url)
        params = dict(parse_qsl(parsed.query))
        params.update({"w": str(width), "h": str(height), "fit": "crop"})
        return urlunparse(parsed._replace(query=urlencode(params)))

    return url


def optimized_image_url(url: str, context: str = "card") -> str:
    """
    Ajusta una URL al preset de un contexto (card, detail, fullscreen, thumbnail).

    Raises:
        KeyError: Si el contexto no existe
    """
    if not url:
        return url
    width, height = IMAGE_SIZES[context]
    return optimize_image_url(url, width, height)
