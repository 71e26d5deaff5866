# 🔹 FILE: hiring_api/services/attachments.py
# ==============================================================
# Attachment Store collaborator (ImageKit HTTP API)
# - upload(file, folder)  → StoredFile(url, file_id)
# - delete(file_id)       → raises UploadError on failure
# - list_files(folder)    → files under a folder (used by the sweep)
# - release(...)          → delete that logs instead of raising,
#                           used by every record delete path
# ==============================================================
import logging
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import List, Optional

import httpx

from ..config import settings
from ..errors import UploadError
from ..uploads import IncomingFile

logger = logging.getLogger(__name__)

LIST_PAGE_SIZE = 1000


@dataclass
class StoredFile:
    url: str
    file_id: str


@dataclass
class RemoteFile:
    file_id: str
    file_path: str
    created_at: Optional[datetime] = None


def project_folder(*parts: str) -> str:
    return "/".join([settings.PROJECT_FOLDER, *parts])


class AttachmentStore:
    """Interface of the remote blob host."""

    def upload(self, file: IncomingFile, folder: str) -> StoredFile:
        raise NotImplementedError

    def delete(self, file_id: str) -> None:
        raise NotImplementedError

    def list_files(self, folder: str) -> List[RemoteFile]:
        raise NotImplementedError


class ImageKitStore(AttachmentStore):
    def __init__(
        self,
        private_key: str,
        upload_url: str,
        api_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.upload_url = upload_url
        self.api_url = api_url.rstrip("/")
        # ImageKit uses basic auth: private key as username, empty password
        self.client = client or httpx.Client(timeout=timeout)
        self.auth = httpx.BasicAuth(private_key, "")

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return self.client.request(method, url, auth=self.auth, **kwargs)
        except httpx.HTTPError as exc:
            raise UploadError(f"Attachment store unreachable: {exc}") from exc

    def upload(self, file: IncomingFile, folder: str) -> StoredFile:
        resp = self._request(
            "POST",
            self.upload_url,
            files={"file": (file.filename, file.content, file.content_type or "application/octet-stream")},
            data={"fileName": file.filename, "folder": folder, "useUniqueFileName": "true"},
        )
        if resp.status_code >= 400:
            raise UploadError(f"Upload failed ({resp.status_code}): {resp.text[:200]}")
        body = resp.json()
        if not body.get("url") or not body.get("fileId"):
            raise UploadError("Upload response missing url/fileId")
        logger.debug("Uploaded %s to %s as %s", file.filename, folder, body["fileId"])
        return StoredFile(url=body["url"], file_id=body["fileId"])

    def delete(self, file_id: str) -> None:
        resp = self._request("DELETE", f"{self.api_url}/files/{file_id}")
        if resp.status_code == 404:
            logger.info("Attachment %s already gone", file_id)
            return
        if resp.status_code >= 400:
            raise UploadError(f"Delete failed ({resp.status_code}): {resp.text[:200]}")

    def list_files(self, folder: str) -> List[RemoteFile]:
        out: List[RemoteFile] = []
        skip = 0
        while True:
            resp = self._request(
                "GET",
                f"{self.api_url}/files",
                params={"path": f"/{folder.strip('/')}", "fileType": "all", "skip": skip, "limit": LIST_PAGE_SIZE},
            )
            if resp.status_code >= 400:
                raise UploadError(f"Listing failed ({resp.status_code}): {resp.text[:200]}")
            page = resp.json()
            for entry in page:
                created = entry.get("createdAt")
                out.append(
                    RemoteFile(
                        file_id=entry["fileId"],
                        file_path=entry.get("filePath", ""),
                        created_at=datetime.fromisoformat(created.replace("Z", "+00:00")) if created else None,
                    )
                )
            if len(page) < LIST_PAGE_SIZE:
                return out
            skip += LIST_PAGE_SIZE


def release(store: AttachmentStore, file_id: Optional[str], owner: str = "") -> bool:
    """
    Best-effort delete used when the owning record goes away.
    A failure is logged and never blocks the record delete.
    """
    if not file_id:
        return False
    try:
        store.delete(file_id)
        return True
    except UploadError as exc:
        logger.warning("Could not release attachment %s of %s: %s", file_id, owner or "record", exc)
        return False


@lru_cache
def get_attachment_store() -> AttachmentStore:
    """FastAPI dependency: one pooled client per process."""
    return ImageKitStore(
        private_key=settings.IMAGEKIT_PRIVATE_KEY,
        upload_url=settings.IMAGEKIT_UPLOAD_URL,
        api_url=settings.IMAGEKIT_API_URL,
        timeout=settings.ATTACHMENT_TIMEOUT_SECONDS,
    )
