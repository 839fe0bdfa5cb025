from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "LAN Share"
    debug: bool = False

    # Shared tree
    share_dir: Path = Path.cwd()
    follow_symlinks: bool = False

    # Uploads
    max_upload_bytes: int = 1024 * 1024 * 1024  # 1 GiB per request body
    upload_chunk_size: int = 1024 * 1024

    # QR codes
    public_url: str = ""  # e.g. http://192.168.1.20:8080, defaults to the request host
    qr_size: int = 150

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    model_config = {
        "env_file": str(Path(__file__).resolve().parent.parent.parent / ".env"),
        "env_prefix": "LANSHARE_",
    }

    @field_validator("share_dir")
    @classmethod
    def _share_dir_exists(cls, value: Path) -> Path:
        resolved = value.expanduser().resolve()
        if not resolved.is_dir():
            raise ValueError(f"share directory {resolved} does not exist or is not a directory")
        return resolved


settings = Settings()
