"""
Report Sinks Module
Delivers the CSV report either to a local file or to a blob storage
endpoint via HTTP PUT
"""

import logging
import time
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import requests

from ..config import (
    BLOB_TYPE,
    CSV_CONTENT_TYPE,
    REPORT_ENCODING,
    REPORTS_DIR,
    InventoryConfig,
    default_report_name,
)
from ..exceptions import ConfigError, ErrorCodes, ReportError

logger = logging.getLogger(__name__)


def redact_url(url: str) -> str:
    """Drop the query string (SAS token) from a URL before logging it"""
    parts = urlsplit(url)
    if not parts.query:
        return url
    return urlunsplit((parts.scheme, parts.netloc, parts.path, '<redacted>', ''))


class ReportSink:
    """Base class for report destinations"""

    def deliver(self, csv_text: str) -> str:
        """
        Deliver the report

        Args:
            csv_text: Serialized report

        Returns:
            str: Where the report went (path or redacted URL)
        """
        raise NotImplementedError("Subclasses must implement deliver()")


class LocalFileSink(ReportSink):
    """Writes the report to a local file"""

    def __init__(self, path):
        self.path = Path(path)

    def deliver(self, csv_text: str) -> str:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # newline='' keeps the csv module's \r\n row endings intact
            with open(self.path, 'w', encoding=REPORT_ENCODING, newline='') as f:
                f.write(csv_text)
        except OSError as e:
            raise ReportError(
                f"Failed to save report to {self.path}: {e}",
                error_code=ErrorCodes.REPORT_SAVE_FAILED,
                details={'path': str(self.path)}
            ) from e

        logger.info(f"Report saved to {self.path}")
        return str(self.path)


class BlobUploadSink(ReportSink):
    """Uploads the report as a block blob with HTTP PUT"""

    def __init__(self, url: str, timeout: int = 30, max_retries: int = 3, retry_delay: float = 2):
        self.url = url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        # Proxy settings (HTTPS_PROXY, NO_PROXY) come from the environment via trust_env
        self.session = requests.Session()

    def deliver(self, csv_text: str) -> str:
        target = redact_url(self.url)
        headers = {
            'x-ms-blob-type': BLOB_TYPE,
            'Content-Type': CSV_CONTENT_TYPE,
        }
        body = csv_text.encode(REPORT_ENCODING)
        last_error: Optional[str] = None

        for attempt in range(self.max_retries):
            try:
                logger.info(f"Uploading report to {target} (Attempt {attempt + 1}/{self.max_retries})")
                response = self.session.put(self.url, data=body, headers=headers, timeout=self.timeout)

                if response.status_code < 400:
                    logger.info(f"Report uploaded ({len(body)} bytes, HTTP {response.status_code})")
                    return target

                last_error = f"HTTP {response.status_code}"
                if response.status_code < 500:
                    # Client errors (bad SAS token, missing container) do not improve on retry
                    break
                logger.error(f"Upload failed: {last_error}")

            except requests.RequestException as e:
                last_error = str(e)
                logger.error(f"Upload failed: {e}")

            if attempt < self.max_retries - 1:
                logger.info(f"Retrying in {self.retry_delay} seconds...")
                time.sleep(self.retry_delay)

        raise ReportError(
            f"Failed to upload report to {target}: {last_error}",
            error_code=ErrorCodes.REPORT_UPLOAD_FAILED,
            details={'url': target}
        )


def create_sink(config: InventoryConfig) -> ReportSink:
    """
    Select the report sink for a configuration

    Args:
        config: Runtime configuration

    Returns:
        LocalFileSink in test mode, BlobUploadSink otherwise

    Raises:
        ConfigError: Upload selected but no endpoint configured
    """
    if config.test_mode:
        path = config.save_path or (REPORTS_DIR / default_report_name())
        return LocalFileSink(path)

    if not config.upload_url:
        raise ConfigError(
            "No upload URL configured (use --upload-url or EXTINV_UPLOAD_URL, or --test-mode)",
            error_code=ErrorCodes.UPLOAD_URL_MISSING
        )
    return BlobUploadSink(
        config.upload_url,
        timeout=config.timeout,
        max_retries=config.max_retries,
        retry_delay=config.retry_delay
    )
