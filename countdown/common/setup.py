import os
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories if missing, and optionally error out when a path
# doesn't exist.
def ensure_directory(path: Path,must_exist=False):
    if must_exist:
        if not path.exists():
            raise FileNotFoundError(f"Required directory is missing: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Expected a directory, got a file: {path}")
    else:
        path.mkdir(parents=True,exist_ok=True)
    return path

# Dataclass for accessing the CLI's on-disk locations. Only the entrypoint builds these, the engine itself never
# touches the filesystem.
@dataclass(frozen=True)
class ProjectPaths:

    data: Path
    logs: Path

    # Works out where things live without creating anything. COUNTDOWN_HOME wins, then the Windows per-user APPDATA
    # folder, then a dotfolder in home.
    @staticmethod
    def locate():
        override = os.getenv("COUNTDOWN_HOME")
        appdata = os.getenv("APPDATA")
        if override:
            data = Path(override)
        elif appdata:
            data = Path(appdata) / "Countdown"
        else:
            data = Path.home() / ".countdown"
        return ProjectPaths(data=data, logs=data / "logs")

    # Same as locate(), but makes sure the folders exist.
    @staticmethod
    def build():
        paths = ProjectPaths.locate()
        ensure_directory(paths.data)
        ensure_directory(paths.logs)
        return paths
