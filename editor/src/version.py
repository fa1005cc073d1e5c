"""Application version.

Released packages carry a baked version string; source checkouts combine
the VERSION file (major.minor) with the git commit count.
"""

import subprocess
from pathlib import Path

# Set in packaged releases; None in a source checkout
_BAKED_VERSION = None

# editor/src/version.py -> project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def get_version() -> str:
    """Version string such as '0.3.12'"""
    if _BAKED_VERSION is not None:
        return _BAKED_VERSION
    return f"{_major_minor()}.{_commit_count()}"


def _major_minor() -> str:
    try:
        return (_PROJECT_ROOT / "VERSION").read_text().strip() or "0.0"
    except FileNotFoundError:
        return "0.0"


def _git(*args):
    """stdout of a git command in the project root, or None"""
    try:
        result = subprocess.run(
            ['git', *args],
            capture_output=True, text=True, check=False,
            cwd=str(_PROJECT_ROOT),
        )
    except FileNotFoundError:
        return None
    return result.stdout.strip() if result.returncode == 0 else None


def _commit_count() -> str:
    # v0.3-12-gabcdef: commits since the last tag
    described = _git('describe', '--tags', '--long')
    if described:
        parts = described.rsplit('-', 2)
        if len(parts) == 3 and parts[1].isdigit():
            return parts[1]
    return _git('rev-list', '--count', 'HEAD') or "0"
