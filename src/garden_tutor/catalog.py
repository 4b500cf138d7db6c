"""Static plant catalog with user-supplied photo overrides."""
import json
import logging
from pathlib import Path
from typing import Optional

from garden_tutor.codec import compress_image, compress_image_file, is_embedded_image
from garden_tutor.db import CUSTOM_IMAGES_KEY, KeyValueStore, ParseError, read_json, write_json
from garden_tutor.models import LightRequirement, Plant

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"


class UnknownPlantError(KeyError):
    """No plant with this id exists in the base catalog."""


class UploadInProgressError(RuntimeError):
    """A photo for this plant is still being processed."""


def load_base_catalog(path: Optional[Path] = None) -> list[Plant]:
    """Read the read-only plant dataset shipped with the package."""
    data = json.loads((path or CONTENT_DIR / "plants.json").read_text(encoding="utf-8"))
    return [Plant.from_dict(p) for p in data["plants"]]


def merge_catalog(base: list[Plant], custom_images: dict[str, str]) -> list[Plant]:
    return [
        p.with_image(custom_images[p.id]) if custom_images.get(p.id) else p
        for p in base
    ]


class CustomImageStore:
    """Persists the plant id -> embedded image mapping."""

    def __init__(self, store: KeyValueStore, key: str = CUSTOM_IMAGES_KEY):
        self.store = store
        self.key = key

    def load(self) -> dict[str, str]:
        result = read_json(self.store, self.key)
        if result is None:
            return {}
        if isinstance(result, ParseError):
            logger.warning("Stored custom images are corrupt (%s); ignoring them", result.message)
            return {}
        if not isinstance(result.value, dict):
            logger.warning("Stored custom images are not a mapping; ignoring them")
            return {}
        images = {}
        for plant_id, blob in result.value.items():
            if isinstance(blob, str) and is_embedded_image(blob):
                images[str(plant_id)] = blob
            else:
                logger.info("Discarding stored image for %s: not an embedded image", plant_id)
        return images

    def save(self, images: dict[str, str]) -> None:
        write_json(self.store, self.key, images)


class PlantCatalog:
    """The effective catalog: base dataset with custom photos overlaid."""

    def __init__(self, base: list[Plant], image_store: CustomImageStore):
        self.base = list(base)
        self._by_id = {p.id: p for p in self.base}
        self.image_store = image_store
        self.custom_images = image_store.load()
        # Drop overrides for plants that are no longer in the dataset.
        stale = [pid for pid in self.custom_images if pid not in self._by_id]
        for pid in stale:
            logger.info("Discarding custom image for unknown plant %s", pid)
            del self.custom_images[pid]
        self._uploading: set[str] = set()
        self._merge()

    def _merge(self) -> None:
        self.plants = merge_catalog(self.base, self.custom_images)

    def _require(self, plant_id: str) -> Plant:
        try:
            return self._by_id[plant_id]
        except KeyError:
            raise UnknownPlantError(plant_id) from None

    def get(self, plant_id: str) -> Plant:
        self._require(plant_id)
        return next(p for p in self.plants if p.id == plant_id)

    def has_custom_image(self, plant_id: str) -> bool:
        return plant_id in self.custom_images

    def set_custom_image(self, plant_id: str, blob: str) -> None:
        self._require(plant_id)
        self.custom_images = {**self.custom_images, plant_id: blob}
        self.image_store.save(self.custom_images)
        self._merge()

    def reset_custom_image(self, plant_id: str) -> None:
        self._require(plant_id)
        if plant_id not in self.custom_images:
            return
        self.custom_images = {k: v for k, v in self.custom_images.items() if k != plant_id}
        self.image_store.save(self.custom_images)
        self._merge()

    def _store_upload(self, plant_id: str, encode) -> str:
        self._require(plant_id)
        if plant_id in self._uploading:
            raise UploadInProgressError(plant_id)
        self._uploading.add(plant_id)
        try:
            blob = encode()
            self.set_custom_image(plant_id, blob)
        finally:
            self._uploading.discard(plant_id)
        logger.info("Stored custom image for %s (%d chars)", plant_id, len(blob))
        return blob

    def update_plant_image(self, plant_id: str, data: bytes) -> str:
        """Compress an uploaded photo and store it as the plant's image.

        Raises DecodeError if the photo can't be read; the catalog is left
        unchanged in that case.
        """
        return self._store_upload(plant_id, lambda: compress_image(data))

    def update_plant_image_from_file(self, plant_id: str, path: str) -> str:
        return self._store_upload(plant_id, lambda: compress_image_file(path))

    def search(self, term: str = "", light: Optional[LightRequirement] = None) -> list[Plant]:
        term = term.strip().lower()
        return [
            p for p in self.plants
            if (term in p.common_name.lower() or term in p.scientific_name.lower())
            and (light is None or p.light is light)
        ]
