"""
Runtime configuration, read from environment variables.

  PORT                        HTTP port (8000)
  DPI_CHECK_DECODE_TIMEOUT_S  seconds to wait for the image decoder; 0 disables (5)
  DPI_CHECK_MAX_UPLOAD_MB     request body cap (50)
  DPI_CHECK_BATCH_WORKERS     threads for batch analysis (4)
"""

import os
from dataclasses import dataclass
from typing import Optional

from .guards import finite


@dataclass(frozen=True)
class Settings:
    port: int = 8000
    decode_timeout_s: Optional[float] = 5.0
    max_upload_mb: float = 50.0
    batch_workers: int = 4

    @property
    def max_content_length(self):
        return int(self.max_upload_mb * 1024 * 1024)


def load_settings(environ=None):
    env = os.environ if environ is None else environ
    d = Settings()
    timeout = finite(env.get("DPI_CHECK_DECODE_TIMEOUT_S"), d.decode_timeout_s)
    upload_mb = finite(env.get("DPI_CHECK_MAX_UPLOAD_MB"), d.max_upload_mb)
    return Settings(
        port=int(finite(env.get("PORT"), d.port)),
        decode_timeout_s=timeout if timeout and timeout > 0 else None,
        max_upload_mb=upload_mb if upload_mb > 0 else d.max_upload_mb,
        batch_workers=max(1, int(finite(env.get("DPI_CHECK_BATCH_WORKERS"), d.batch_workers))),
    )
