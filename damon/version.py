"""Version information for display."""

from __future__ import annotations

GIT_COMMIT = ""
GIT_DESCRIBE = ""
VERSION = "0.1.0"
VERSION_PRERELEASE = "dev"
VERSION_METADATA = ""


def get_human_version(
    version: str = VERSION,
    prerelease: str = VERSION_PRERELEASE,
    metadata: str = VERSION_METADATA,
    git_commit: str = GIT_COMMIT,
    git_describe: str = GIT_DESCRIBE,
) -> str:
    """Compose the version parts into a string suitable for humans."""
    if git_describe:
        result = git_describe
    else:
        release = prerelease or "dev"
        result = version
        if not result.endswith(f"-{release}"):
            result += f"-{release}"
        if metadata:
            result += f"+{metadata}"

    if git_commit:
        result += f" ({git_commit})"

    if not result.startswith("v"):
        result = f"v{result}"

    return result.replace("'", "")