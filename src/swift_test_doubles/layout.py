"""Output directory inference from a project's test target layout.

The pipeline never decides where artifacts go; this module provides the
default resolver the command line uses when no output directory is given.
It only computes paths and never touches the file system.
"""

from pathlib import Path

TEST_DIRECTORY_SUFFIX = "Tests"

_SYSTEM_DIRECTORIES = frozenset(
    {"usr", "bin", "lib", "opt", "var", "tmp", "Applications", "Library", "System"}
)

# Directories that organise sources inside a project rather than name it
_SOURCE_DIRECTORIES = frozenset(
    {
        "Sources",
        "src",
        "Source",
        "Classes",
        "Models",
        "Views",
        "Controllers",
        "Scenes",
        "Domain",
        "Entities",
        "Presentation",
        "Infrastructure",
        "Core",
        "Common",
        "Shared",
        "Utils",
        "Utilities",
        "Extensions",
        "Resources",
        "Assets",
        "Storyboards",
        "XIBs",
    }
)

_PROJECT_BUNDLE_SUFFIXES = (".xcodeproj", ".xcworkspace")
_SOURCE_SUFFIX = ".swift"
_HOME_ROOT = "Users"

# Directories this far below the home root are taken to be projects
_HOME_PROJECT_DEPTH = 2


def _is_likely_project_directory(parts: tuple[str, ...], index: int) -> bool:
    component = parts[index]
    if component in _SYSTEM_DIRECTORIES or component in _SOURCE_DIRECTORIES:
        return False

    if index + 1 < len(parts):
        following = parts[index + 1]
        if following in _SOURCE_DIRECTORIES or following.endswith(_SOURCE_SUFFIX):
            return True

    if component.endswith(_PROJECT_BUNDLE_SUFFIXES):
        return False

    if _HOME_ROOT in parts:
        return index > parts.index(_HOME_ROOT) + _HOME_PROJECT_DEPTH
    return False


def find_project_directory_index(parts: tuple[str, ...]) -> int | None:
    """Find the path component naming the project, searching from the file upwards.

    Args:
        parts: Path components, the last one being the source file

    Returns:
        Index into ``parts`` or None if no component looks like a project

    """
    first_directory = 1 if parts and Path(parts[0]).anchor == parts[0] else 0
    for index in range(len(parts) - 2, first_directory - 1, -1):
        if parts[index].endswith(TEST_DIRECTORY_SUFFIX):
            continue
        if _is_likely_project_directory(parts, index):
            return index
    return None


def infer_output_directory(input_path: Path) -> Path:
    """Infer where artifacts for a source file belong.

    1. A file already inside a ``*Tests`` directory keeps its directory.
    2. Otherwise the project directory is located and the file's path below
       it is mirrored under a sibling ``<Project>Tests`` directory, so
       ``App/Sources/Model.swift`` maps to ``AppTests/Sources``. The nearest
       directory that is not a conventional source folder counts as the
       project, so ``App/Sources/Feature/Model.swift`` maps to
       ``App/Sources/FeatureTests``.
    3. If no project directory can be identified, the file's directory is used.

    Args:
        input_path: Path of the source file

    Returns:
        Directory for the generated artifacts (not created)

    """
    parts = input_path.parts
    directories = parts[:-1]

    if any(part.endswith(TEST_DIRECTORY_SUFFIX) for part in directories):
        return input_path.parent

    project_index = find_project_directory_index(parts)
    if project_index is None:
        return input_path.parent

    project_name = parts[project_index]
    return Path(
        *parts[:project_index],
        f"{project_name}{TEST_DIRECTORY_SUFFIX}",
        *parts[project_index + 1 : -1],
    )
