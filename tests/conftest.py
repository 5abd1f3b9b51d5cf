"""
Pytest configuration and shared fixtures
"""
import csv
import io
import json
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ext_inventory.config import REPORT_COLUMNS
from ext_inventory.core.scanner import ExtensionRecord, ExtensionScanner


def write_extension(root: Path, ext_id: str, version: str, name=None,
                    messages=None, raw_manifest=None) -> Path:
    """
    Create <root>/<ext_id>/<version>/manifest.json (and optionally the en locale)

    Args:
        root: Extensions directory
        ext_id: Extension id directory name
        version: Version directory name
        name: Manifest name field (omitted when None)
        messages: Dict written to _locales/en/messages.json
        raw_manifest: Raw text written instead of a JSON manifest

    Returns:
        Path to the manifest
    """
    version_dir = root / ext_id / version
    version_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = version_dir / "manifest.json"

    if raw_manifest is not None:
        manifest_path.write_text(raw_manifest, encoding="utf-8")
    else:
        manifest = {"manifest_version": 3, "version": version}
        if name is not None:
            manifest["name"] = name
        manifest_path.write_text(json.dumps(manifest), encoding="utf-8")

    if messages is not None:
        locale_dir = version_dir / "_locales" / "en"
        locale_dir.mkdir(parents=True, exist_ok=True)
        (locale_dir / "messages.json").write_text(json.dumps(messages), encoding="utf-8")

    return manifest_path


def read_report(data: str) -> list:
    """
    Parse report text back into row dicts (a leading BOM is tolerated)

    Args:
        data: Raw CSV string

    Returns:
        List of dicts keyed by REPORT_COLUMNS
    """
    if not data:
        return []
    data = data.strip().lstrip('\ufeff')
    reader = csv.DictReader(io.StringIO(data))
    assert reader.fieldnames == REPORT_COLUMNS
    return [row for row in reader]


@pytest.fixture
def make_extension():
    """Factory fixture writing a fake installed extension"""
    return write_extension


@pytest.fixture
def parse_report():
    """Reader for saved or uploaded reports"""
    return read_report


@pytest.fixture
def scanner():
    """Create ExtensionScanner instance with no ignored ids"""
    return ExtensionScanner()


@pytest.fixture
def extensions_root(tmp_path):
    """Chrome-like Extensions directory of the Default profile"""
    root = tmp_path / "User Data" / "Default" / "Extensions"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def profile_root(tmp_path):
    """Fake Windows profile directory with Chrome and Edge user data"""
    profile = tmp_path / "Users" / "alice"
    (profile / "AppData" / "Local" / "Google" / "Chrome" / "User Data").mkdir(parents=True)
    (profile / "AppData" / "Local" / "Microsoft" / "Edge" / "User Data").mkdir(parents=True)
    return profile


@pytest.fixture
def sample_records():
    """Records as produced by a Chrome and an Edge scan"""
    return [
        ExtensionRecord("cjpalhdlnbpafiamejdnhcphjbkeiagm", "uBlock Origin", "Chrome"),
        ExtensionRecord("aeblfdkhhhdcdjpifhhbdiojplfjncoa", "1Password", "Chrome"),
        ExtensionRecord("odfafepnkmbhccpbejgmiehpchacaeak", "uBlock Origin", "Edge"),
    ]
