"""Runtime detection for the Environment section of a bundle.

Only languages with a standalone toolchain command get a version; the
rest report none.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)

# Version commands by language id
VERSION_COMMANDS: dict[str, list[str]] = {
    "python": ["python", "--version"],
    "go": ["go", "version"],
}

# Seconds to wait for a version command
VERSION_TIMEOUT = 5


def runtime_version(language_id: str) -> str | None:
    """Return the installed toolchain version for a language.

    Args:
        language_id: Editor language identifier (e.g. "python").

    Returns:
        The command's trimmed output (e.g. "Python 3.12.1"), or None when
        the language has no version command or the command fails.

    """
    command = VERSION_COMMANDS.get(language_id)
    if command is None:
        return None

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=VERSION_TIMEOUT,
        )
    except subprocess.TimeoutExpired:
        logger.warning("Timeout running %s", " ".join(command))
        return None
    except OSError as e:
        logger.debug("Cannot run %s: %s", command[0], e)
        return None

    if result.returncode != 0:
        logger.debug("%s exited with %d", " ".join(command), result.returncode)
        return None

    # Older Python releases print the version on stderr
    output = (result.stdout or result.stderr).strip()
    return output or None
