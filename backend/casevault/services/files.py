"""
Evidence file retrieval.

Fetches stored evidence bytes by content identifier, names the artifact
from the declared media type and hands it to a save target. One download
at a time per retriever.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from casevault.api.files import FileService
from casevault.core.config import Settings, settings as default_settings
from casevault.core.exceptions import DownloadFailedError, FetchError
from casevault.core.logging import get_logger
from casevault.services.operation import OperationState, SingleFlight

logger = get_logger(__name__)

DEFAULT_MEDIA_TYPE = "application/octet-stream"
DEFAULT_EXTENSION = "bin"

# Subtypes that name an encoding rather than a file format
OPAQUE_SUBTYPES = {"octet-stream"}


def extension_for(media_type: Optional[str]) -> str:
    """
    File extension from a media type: its subtype without parameters.

    >>> extension_for("image/png")
    'png'
    >>> extension_for("text/plain; charset=utf-8")
    'plain'
    >>> extension_for("application")
    'bin'
    >>> extension_for("application/octet-stream")
    'bin'
    """
    if not media_type:
        return DEFAULT_EXTENSION
    _, _, subtype = media_type.partition("/")
    subtype = subtype.split(";", 1)[0].strip().lower()
    if not subtype or subtype in OPAQUE_SUBTYPES:
        return DEFAULT_EXTENSION
    return subtype


@dataclass(frozen=True)
class EvidenceArtifact:
    file_name: str
    media_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class SaveTarget(Protocol):
    def save(self, artifact: EvidenceArtifact) -> Path:
        """Persist the artifact and return where it was written."""
        ...


class DirectorySaveTarget:
    """Saves artifacts into a local directory without overwriting."""

    def __init__(self, directory: Optional[str] = None, settings: Optional[Settings] = None):
        self.directory = Path(directory or (settings or default_settings).DOWNLOAD_DIR)

    def _available_path(self, file_name: str) -> Path:
        candidate = self.directory / file_name
        stem, suffix = Path(file_name).stem, Path(file_name).suffix
        counter = 1
        while candidate.exists():
            candidate = self.directory / f"{stem} ({counter}){suffix}"
            counter += 1
        return candidate

    def save(self, artifact: EvidenceArtifact) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._available_path(artifact.file_name)
        path.write_bytes(artifact.content)
        return path


@dataclass(frozen=True)
class DownloadResult:
    artifact: EvidenceArtifact
    path: Path


class EvidenceFileRetriever:
    def __init__(
        self,
        files: FileService,
        target: SaveTarget,
        default_name: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        self.files = files
        self.target = target
        self.default_name = default_name or (settings or default_settings).DEFAULT_DOWNLOAD_NAME
        self._download = SingleFlight("evidence.download")

    @property
    def state(self) -> OperationState:
        return self._download.state

    @property
    def busy(self) -> bool:
        return self._download.busy

    async def download(
        self,
        content_id: str,
        fallback_name: Optional[str] = None,
    ) -> Optional[DownloadResult]:
        """
        Download an evidence file and save it as `{fallback_name}.{ext}`.

        Returns None without fetching while another download is in flight.

        Raises:
            DownloadFailedError: If fetching or saving fails
        """
        if self._download.busy:
            logger.debug(f"Download of {content_id} ignored, another download is in flight")
            return None

        name = fallback_name or self.default_name
        with self._download.run():
            try:
                payload = await self.files.fetch(content_id)
            except FetchError as e:
                raise DownloadFailedError(e.message or "File download failed", e.status_code) from e

            media_type = payload.media_type or DEFAULT_MEDIA_TYPE
            artifact = EvidenceArtifact(
                file_name=f"{name}.{extension_for(media_type)}",
                media_type=media_type,
                content=payload.content,
            )
            try:
                path = self.target.save(artifact)
            except OSError as e:
                raise DownloadFailedError(f"Could not save {artifact.file_name}: {e}") from e

        logger.info(f"Saved evidence file {artifact.file_name} ({artifact.size} bytes) to {path}")
        return DownloadResult(artifact=artifact, path=path)
