# storefront/services/image_client.py
import requests

from storefront.utils.settings import REMOTE_API_URL, REMOTE_TIMEOUT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ImageUploadClient:
    """Turns a data URI into a hosted URL via POST /api/upload-image."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or REMOTE_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else REMOTE_TIMEOUT

    def upload(self, data_uri: str, filename: str = "image.jpg") -> str:
        url = f"{self.base_url}/api/upload-image"
        logger.info(f"ImageUploadClient POST {url} ({filename})")

        resp = requests.post(
            url,
            json={"image": data_uri, "filename": filename},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()["url"]
