"""Extension system for toolenv.

An extension provisions one developer toolchain for a workspace:

- init(): decide whether the workspace uses the toolchain and bind its config
- setup_tasks(): ordered install steps still required (empty once installed)
- environment() / aliases() / paths(): contributions to the activated shell

Toolchains are installed under the workspace directory:

    <workspace>/
    └── .go/
        ├── release/           # Downloaded archives (staging)
        └── 1.11.2/
            └── go/
                └── bin/go     # Presence means "installed"
"""

from extensions.base import (
    Extension,
    ExtensionNotInitializedError,
    NullProgress,
    ProgressReporter,
)
from extensions.config import ConfigDecodeError, ToolchainConfig, decode_section
from extensions.envcomposer import EnvComposer, compose_paths
from extensions.installer import (
    DownloadError,
    ExtractionError,
    FilesystemError,
    InstallError,
)
from extensions.registry import ExtensionRegistry
from extensions.tasks import SetupTask, SetupTaskError, procedure, run_setup_tasks

__all__ = [
    "ConfigDecodeError",
    "DownloadError",
    "EnvComposer",
    "Extension",
    "ExtensionNotInitializedError",
    "ExtensionRegistry",
    "ExtractionError",
    "FilesystemError",
    "InstallError",
    "NullProgress",
    "ProgressReporter",
    "SetupTask",
    "SetupTaskError",
    "ToolchainConfig",
    "compose_paths",
    "decode_section",
    "procedure",
    "run_setup_tasks",
]
