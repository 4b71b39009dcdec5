"""Constants shared by the git client backends.

Ref namespaces, default remote and exit codes live here so that both the
command-line and the library backed clients agree on naming.
"""

from __future__ import annotations

# =============================================================================
# Remotes
# =============================================================================

#: Remote used when a caller does not name one
DEFAULT_REMOTE: str = "origin"

# =============================================================================
# Ref namespaces
# =============================================================================

#: Prefix of local branch refs
R_HEADS: str = "refs/heads/"

#: Prefix of tag refs
R_TAGS: str = "refs/tags/"

#: Prefix of remote-tracking branch refs
R_REMOTES: str = "refs/remotes/"

# =============================================================================
# Process exit codes
# =============================================================================

#: Exit code of a successful command
SUCCESS_EXIT_CODE: int = 0

#: Exit code reported when the executable cannot be found
COMMAND_NOT_FOUND_EXIT_CODE: int = 127

#: Exit code reported when the executable cannot be run
PERMISSION_DENIED_EXIT_CODE: int = 126

# =============================================================================
# Executables
# =============================================================================

#: Default git executable on POSIX hosts
GIT_EXECUTABLE: str = "git"

#: Default git executable on Windows hosts
GIT_EXECUTABLE_WINDOWS: str = "git.exe"

# =============================================================================
# Merge recovery hints
# =============================================================================

RESOLVE_CONFLICTS = "resolve_conflicts"
RESET_MERGE = "reset_merge"

#: Human readable recovery hint for each merge failure kind
MERGE_RESOLUTION_HINTS: dict[str, str] = {
    RESOLVE_CONFLICTS: "please resolve your merge conflicts",
    RESET_MERGE: "please run 'git reset --merge' to get back to a clean state",
}
