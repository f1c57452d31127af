"""Backend target resolution."""

from dataclasses import dataclass

from core.config import BackendSettings


@dataclass(frozen=True)
class BackendTarget:
    """Host/port pair identifying the static-content server."""

    host: str
    port: str
    scheme: str = "http"
    base_path: str = ""

    @classmethod
    def from_settings(cls, settings: BackendSettings) -> "BackendTarget":
        return cls(
            host=settings.host,
            port=str(settings.port),
            scheme=settings.scheme,
            base_path=settings.base_path.rstrip("/"),
        )

    @property
    def authority(self) -> str:
        """host:port as it appears in a resolved URL and in a Host header."""
        if not self.port:
            return self.host
        return f"{self.host}:{self.port}"

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.authority}{self.base_path}"
