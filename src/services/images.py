"""Image storage for product media."""
import re
import uuid
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, Optional

# Path segments allowed in folders and public ids
SAFE_SEGMENT = re.compile(r"[^A-Za-z0-9._-]+")


def _clean_folder(folder: str) -> str:
    parts = [SAFE_SEGMENT.sub("-", part).strip(".-") for part in folder.split("/")]
    return "/".join(part for part in parts if part)


class LocalImageStore:
    """
    Stores uploads on the local filesystem under ``root``.

    Public ids are paths relative to ``root``; URLs are ``base_url`` joined
    with the public id.
    """

    def __init__(self, root: str, base_url: str = "/media"):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def upload(self, file: BinaryIO, folder: str, filename: Optional[str] = None) -> Dict[str, str]:
        """
        Save an uploaded file.

        Args:
            file: Binary file object
            folder: Logical folder, e.g. ``products/clothing/white``
            filename: Original filename, used only for its extension

        Returns:
            Dictionary with ``url`` and ``publicId``
        """
        suffix = Path(filename).suffix.lower() if filename else ""
        public_id = "/".join(filter(None, [_clean_folder(folder), f"{uuid.uuid4().hex}{suffix}"]))
        path = self._path_for(public_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as out:
            out.write(file.read())
        print(f"[IMAGES] Stored {public_id}")
        return {"url": f"{self.base_url}/{public_id}", "publicId": public_id}

    def delete(self, public_id: str):
        """Remove a stored file; raises FileNotFoundError if it is gone."""
        self._path_for(public_id).unlink()
        print(f"[IMAGES] Deleted {public_id}")

    def public_id_for(self, url: str) -> Optional[str]:
        """Recover the public id from a URL this store produced."""
        prefix = f"{self.base_url}/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None

    def _path_for(self, public_id: str) -> Path:
        root = self.root.resolve()
        path = (root / public_id).resolve()
        if root not in path.parents:
            raise ValueError(f"Invalid image id '{public_id}'")
        return path


def release_images(store, public_ids: Iterable[Optional[str]]) -> int:
    """
    Best-effort deletion of stored images.

    Failures are logged and skipped; the caller's operation carries on.

    Returns:
        Number of images deleted
    """
    if store is None:
        return 0
    deleted = 0
    for public_id in public_ids:
        if not public_id:
            continue
        try:
            store.delete(public_id)
            deleted += 1
        except Exception as e:
            print(f"[IMAGES] Failed to delete {public_id}: {e}")
    return deleted
