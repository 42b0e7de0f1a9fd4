"""
Script para actualizar las imágenes del dataset de propiedades.

Reemplaza el campo `images` de cada propiedad por una URL compatible:
Unsplash Source según el tipo (default) o Picsum con el id como seed.

Uso:
    python -m mirador.scripts.update_property_images
    python -m mirador.scripts.update_property_images --picsum
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

import structlog

from mirador.config import get_settings
from mirador.logging_config import configure_logging
from mirador.portfolio import load_properties, save_properties
from mirador.portfolio.images import picsum_image_url, property_image_url

logger = structlog.get_logger()


def update_property_images(path: Path, use_picsum: bool = False) -> int:
    """
    Reescribe las imágenes de todas las propiedades del archivo.

    Returns:
        Cantidad de propiedades actualizadas
    """
    properties = load_properties(path)

    updated = []
    for item in properties:
        if use_picsum:
            url = picsum_image_url(800, 600, seed=item.id)
        else:
            url = property_image_url(item.type or "Office", 800, 600)
        updated.append(item.model_copy(update={"images": [url]}))

    save_properties(path, updated)
    logger.info(
        "Imágenes actualizadas",
        total=len(updated),
        source="picsum" if use_picsum else "unsplash",
        path=str(path),
    )
    return len(updated)


def main(argv: Optional[list[str]] = None):
    """Entry point del script."""
    settings = get_settings()
    configure_logging(settings.log_level)

    parser = argparse.ArgumentParser(description="Actualiza las imágenes del dataset")
    parser.add_argument("--path", help="Dataset JSON (default: settings.properties_path)")
    parser.add_argument("-p", "--picsum", action="store_true", help="Usar Picsum en vez de Unsplash")
    args = parser.parse_args(argv)

    try:
        update_property_images(Path(args.path or settings.properties_path), use_picsum=args.picsum)
        sys.exit(0)
    except Exception as e:
        logger.error("Error actualizando imágenes", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
