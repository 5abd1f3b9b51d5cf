"""
User Session Module
Locates the profile directory of the interactive (console) user and the
browser roots inside it
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

import psutil

from ..config import BROWSERS, DEFAULT_PROFILE, EXTENSIONS_DIRNAME, PROFILE_GLOB

logger = logging.getLogger(__name__)

SHELL_PROCESS_NAME = "explorer.exe"
PROFILE_LIST_KEY = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion\ProfileList"


def _strip_domain(username: Optional[str]) -> Optional[str]:
    """DOMAIN\\user -> user"""
    if not username:
        return None
    return username.split('\\')[-1] or None


class ActiveUserResolver:
    """Resolves the data root (profile directory) of the active user"""

    def resolve_active_user_data_root(self) -> Optional[Path]:
        """
        Return the profile directory of the interactive user

        Returns:
            Path or None if no interactive user could be determined
        """
        raise NotImplementedError("Subclasses must implement resolve_active_user_data_root()")


class StaticUserResolver(ActiveUserResolver):
    """Always returns a fixed profile directory"""

    def __init__(self, profile_root):
        self.profile_root = Path(profile_root) if profile_root else None

    def resolve_active_user_data_root(self) -> Optional[Path]:
        return self.profile_root


class WindowsActiveUserResolver(ActiveUserResolver):
    """
    Finds the user owning the desktop shell and maps it to a profile path
    through the registry ProfileList
    """

    def get_active_username(self) -> Optional[str]:
        """
        Get the name of the interactive user

        The owner of explorer.exe is the user sitting at the console; when no
        shell is running the first logged-in session is used.

        Returns:
            str: Username without domain, or None
        """
        for proc in psutil.process_iter(['name', 'username']):
            try:
                name = (proc.info.get('name') or '').lower()
                if name == SHELL_PROCESS_NAME:
                    username = _strip_domain(proc.info.get('username'))
                    if username:
                        logger.debug(f"Shell process {proc.pid} owned by {username}")
                        return username
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue

        users = psutil.users()
        if users:
            return _strip_domain(users[0].name)
        return None

    def lookup_profile_path(self, username: str) -> Optional[Path]:
        """
        Find a user's profile directory in the registry ProfileList

        Args:
            username: Account name without domain

        Returns:
            Path or None if no matching profile exists
        """
        try:
            import winreg
        except ImportError:
            logger.debug("winreg unavailable, skipping ProfileList lookup")
            return None

        wanted = username.lower()
        try:
            with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, PROFILE_LIST_KEY) as key:
                i = 0
                while True:
                    try:
                        sid = winreg.EnumKey(key, i)
                    except OSError:
                        break
                    i += 1
                    try:
                        with winreg.OpenKey(key, sid) as sid_key:
                            image_path, _ = winreg.QueryValueEx(sid_key, "ProfileImagePath")
                    except OSError:
                        continue
                    profile = Path(os.path.expandvars(image_path))
                    if profile.name.lower() == wanted:
                        logger.debug(f"Profile for {username} ({sid}): {profile}")
                        return profile
        except OSError as e:
            logger.warning(f"Failed to read ProfileList: {e}")
        return None

    def resolve_active_user_data_root(self) -> Optional[Path]:
        username = self.get_active_username()
        if not username:
            logger.error("No interactive user session found")
            return None

        profile = self.lookup_profile_path(username)
        if profile is None:
            system_drive = os.environ.get('SystemDrive', 'C:')
            candidate = Path(f"{system_drive}\\") / "Users" / username
            if candidate.is_dir():
                profile = candidate

        if profile is None:
            logger.error(f"No profile directory found for {username}")
            return None

        logger.info(f"Active user: {username} ({profile})")
        return profile


def resolve_browser_roots(profile_root: Path) -> List[Tuple[str, Path]]:
    """
    Build the extension directories of each supported browser

    Every browser profile (Default, Profile 1, ...) has its own Extensions
    folder; component updater data elsewhere in User Data is not included.

    Args:
        profile_root: User profile directory

    Returns:
        List of (browser name, Extensions directory) in scan order
    """
    local_app_data = Path(profile_root) / "AppData" / "Local"
    roots = []
    for browser, relative in BROWSERS.items():
        user_data = local_app_data / relative
        profiles = [user_data / DEFAULT_PROFILE]
        if user_data.is_dir():
            profiles.extend(sorted(p for p in user_data.glob(PROFILE_GLOB) if p.is_dir()))
        roots.extend((browser, profile / EXTENSIONS_DIRNAME) for profile in profiles)
    return roots
