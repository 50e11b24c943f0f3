"""Archive builders and a fake release host for tests."""

import io
import tarfile
import zipfile
from pathlib import Path

import httpx


def make_tarball(files: dict[str, bytes]) -> bytes:
    """Build a gzipped tarball in memory with executable members."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def make_zip(files: dict[str, bytes]) -> bytes:
    """Build a zip archive in memory."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buf.getvalue()


class ReleaseServer:
    """Fake release host served through httpx.MockTransport.

    Archives are looked up by the last path segment of the request URL.
    """

    def __init__(self, archives: dict[str, bytes] | None = None, status: int = 200):
        self.archives = archives or {}
        self.status = status
        self.requests: list[str] = []
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(str(request.url))
        if self.error is not None:
            raise self.error
        if self.status != 200:
            return httpx.Response(self.status, content=b"server error")
        name = request.url.path.rsplit("/", 1)[-1]
        if name not in self.archives:
            return httpx.Response(404)
        return httpx.Response(200, content=self.archives[name])

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def go_binary(root: Path, version: str = "1.11.2") -> Path:
    return root / ".go" / version / "go" / "bin" / "go"
