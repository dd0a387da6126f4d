"""
Artifact Encoder - moves binaries between the user and the backend.

- encode_for_upload: local image -> base64 payload + displayable reference
- materialize_download: remote video URI -> file on local disk
"""

import base64
import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Optional, Union

import httpx

from .errors import DownloadFailed, UnsupportedMediaType
from .models import EncodedImage, LocalArtifact

logger = logging.getLogger(__name__)


def encode_for_upload(
    source: Union[str, Path],
    media_type: Optional[str] = None,
) -> EncodedImage:
    """
    Encode an image file for upload.

    Args:
        source: Path to the image
        media_type: Declared media type (guessed from the filename if None)

    Returns:
        EncodedImage with base64 data, media type and a file:// preview URI

    Raises:
        UnsupportedMediaType: If the file is not an image
    """
    path = Path(source)
    if media_type is None:
        media_type, _ = mimetypes.guess_type(path.name)

    if not media_type or not media_type.startswith("image/"):
        raise UnsupportedMediaType(
            f"{UnsupportedMediaType.default_message} Got: {media_type or 'unknown type'}"
        )

    raw = path.read_bytes()
    logger.debug(f"Encoded {path.name} ({media_type}, {len(raw)} bytes)")

    return EncodedImage(
        data=base64.b64encode(raw).decode("ascii"),
        media_type=media_type,
        preview_ref=path.resolve().as_uri(),
        size_bytes=len(raw),
    )


async def materialize_download(
    remote_uri: str,
    api_key: str,
    output_dir: Union[str, Path] = "output",
    client: Optional[httpx.AsyncClient] = None,
    credential_param: str = "key",
    timeout: float = 600.0,
) -> LocalArtifact:
    """
    Download a finished video to local storage.

    The artifact URI only serves the file when the API key is appended as
    a query parameter. There is no retry; any failure is final.

    Args:
        remote_uri: URI reported by the completed operation
        api_key: Key appended as ``credential_param``
        output_dir: Directory for the downloaded file
        client: Optional shared HTTP client (one is created if None)
        credential_param: Query parameter name for the key
        timeout: Request timeout in seconds when creating a client

    Returns:
        LocalArtifact pointing at the written file

    Raises:
        DownloadFailed: On a non-2xx response, a malformed URI or a transport error
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=timeout)

    try:
        try:
            response = await client.get(
                remote_uri,
                params={credential_param: api_key},
                follow_redirects=True,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DownloadFailed(
                f"{DownloadFailed.default_message}: {type(e).__name__}: {e}"
            ) from e

        if not response.is_success:
            raise DownloadFailed(
                f"{DownloadFailed.default_message}: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        base_dir = Path(output_dir)
        base_dir.mkdir(parents=True, exist_ok=True)
        output_path = base_dir / f"video_{uuid.uuid4().hex[:8]}.mp4"

        with open(output_path, "wb") as f:
            f.write(response.content)

        logger.info(
            f"Video downloaded: {output_path} ({len(response.content) / 1024 / 1024:.1f} MB)"
        )

        return LocalArtifact(
            path=output_path,
            uri=output_path.resolve().as_uri(),
            source_uri=remote_uri,
            media_type=response.headers.get("content-type", "video/mp4").split(";")[0],
            size_bytes=len(response.content),
        )
    finally:
        if owns_client:
            await client.aclose()
