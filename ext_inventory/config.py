"""
Configuration module for ExtInventory
Contains paths, browser locations, built-in extension ids and the runtime
configuration object handed to the report sink
"""

import os
import sys
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Dict, FrozenSet, Mapping, Optional

# Application metadata
APP_NAME = "ExtInventory"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Browser extension inventory for the interactive Windows user"


def default_data_dir(env: Optional[Mapping[str, str]] = None, frozen: Optional[bool] = None) -> Path:
    """
    Directory holding logs and locally saved reports

    Args:
        env: Environment mapping (defaults to os.environ)
        frozen: Whether running as a compiled executable (defaults to sys.frozen)

    Returns:
        Path: Executable directory when frozen, else %LOCALAPPDATA%\\ExtInventory,
        else the current directory
    """
    env = os.environ if env is None else env
    frozen = getattr(sys, 'frozen', False) if frozen is None else frozen
    if frozen:
        # Running as compiled executable
        return Path(sys.executable).parent
    local_app_data = env.get('LOCALAPPDATA')
    if local_app_data:
        return Path(local_app_data) / APP_NAME
    return Path.cwd()


DATA_DIR = default_data_dir()

# Directory paths
LOGS_DIR = DATA_DIR / "logs"
REPORTS_DIR = DATA_DIR / "reports"

# Browser user data directories, relative to <profile>\AppData\Local.
# Order matters: browsers are scanned in this order.
BROWSERS: Dict[str, Path] = {
    "Chrome": Path("Google") / "Chrome" / "User Data",
    "Edge": Path("Microsoft") / "Edge" / "User Data",
}

# Browser profiles inside a user data directory, and their extension folder
DEFAULT_PROFILE = "Default"
PROFILE_GLOB = "Profile *"
EXTENSIONS_DIRNAME = "Extensions"

# Component/default extensions shipped with the browsers themselves
IGNORED_EXTENSION_IDS: FrozenSet[str] = frozenset({
    "ahfgeienlihckogmohjhadlkjgocpleb",  # Chrome Web Store
    "nmmhkkegccagdldgiimedpiccmgmieda",  # Chrome Web Store Payments
    "ghbmnnjooekpmoecnnnilnnbdlolhkhi",  # Google Docs Offline
    "mhjfbmdgcfjbbpaeojofohoefgiehjai",  # Chrome PDF Viewer
    "pkedcjkdefgpdelpbcmbmeomcjbeemfm",  # Chrome Media Router
    "kmendfapggjehodndflmmgagdbamhnfd",  # CryptoToken component
    "aapocclcgogkmnckokdopfmhonfmgoek",  # Slides
    "aohghmighlieiainnegkcijnfilokake",  # Docs
    "apdfllckaahabafndbhieahigkjlhalf",  # Google Drive
    "blpcfgokakmgnkcojhhkbfbldkacnbeo",  # YouTube
    "felcaaldnbdncclmgdcncolpebgiejap",  # Sheets
    "pjkljhegncpnkpknbcohdijeoejaedia",  # Gmail
    "jmjflgjpcpepeafmmgdpfkogkghcpiha",  # Edge relevant text changes
})

# Report layout
REPORT_COLUMNS = ["ExtensionID", "Name", "Browser"]
REPORT_ENCODING = "utf-8"

# Upload configuration
UPLOAD_TIMEOUT = 30  # seconds
MAX_RETRIES = 3
RETRY_DELAY = 2  # seconds
BLOB_TYPE = "BlockBlob"
CSV_CONTENT_TYPE = "text/csv; charset=utf-8"

# Environment variables read by InventoryConfig.from_env
ENV_TEST_MODE = "EXTINV_TEST_MODE"
ENV_SAVE_PATH = "EXTINV_SAVE_PATH"
ENV_UPLOAD_URL = "EXTINV_UPLOAD_URL"
ENV_EXTRA_IGNORED_IDS = "EXTINV_EXTRA_IGNORED_IDS"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def default_report_name(hostname: Optional[str] = None, when: Optional[datetime] = None) -> str:
    """Build the default report file name, e.g. extensions_HOST_20250101_120000.csv"""
    hostname = hostname or os.environ.get("COMPUTERNAME") or "localhost"
    when = when or datetime.now()
    return f"extensions_{hostname}_{when.strftime('%Y%m%d_%H%M%S')}.csv"


def _split_ids(value: Optional[str]) -> FrozenSet[str]:
    if not value:
        return frozenset()
    return frozenset(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class InventoryConfig:
    """Runtime settings passed explicitly to the inventory run and the report sink"""
    test_mode: bool = False
    save_path: Optional[Path] = None
    upload_url: Optional[str] = None
    ignored_ids: FrozenSet[str] = field(default_factory=lambda: IGNORED_EXTENSION_IDS)
    timeout: int = UPLOAD_TIMEOUT
    max_retries: int = MAX_RETRIES
    retry_delay: float = RETRY_DELAY

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, **overrides) -> "InventoryConfig":
        """
        Build a configuration from environment variables

        Args:
            env: Environment mapping (defaults to os.environ)
            **overrides: Explicit values (e.g. from the command line); None values are ignored

        Returns:
            InventoryConfig
        """
        env = os.environ if env is None else env

        save_path = env.get(ENV_SAVE_PATH)
        config = cls(
            test_mode=env.get(ENV_TEST_MODE, "").strip().lower() in _TRUE_VALUES,
            save_path=Path(save_path) if save_path else None,
            upload_url=env.get(ENV_UPLOAD_URL) or None,
            ignored_ids=IGNORED_EXTENSION_IDS | _split_ids(env.get(ENV_EXTRA_IGNORED_IDS)),
        )

        extra_ids = overrides.pop("extra_ignored_ids", None)
        if extra_ids:
            config = replace(config, ignored_ids=config.ignored_ids | frozenset(extra_ids))

        explicit = {key: value for key, value in overrides.items() if value is not None}
        if "save_path" in explicit:
            explicit["save_path"] = Path(explicit["save_path"])
        return replace(config, **explicit)
