from __future__ import annotations


COMMIT_ANALYZER_PLUGIN = "@semantic-release/commit-analyzer"
NOTES_GENERATOR_PLUGIN = "@semantic-release/release-notes-generator"
NPM_PLUGIN = "@semantic-release/npm"
CHANGELOG_PLUGIN = "@semantic-release/changelog"
GIT_PLUGIN = "@semantic-release/git"
GITHUB_PLUGIN = "@semantic-release/github"

REQUIRED_PLUGINS: tuple[str, ...] = (COMMIT_ANALYZER_PLUGIN, NOTES_GENERATOR_PLUGIN)

# Name under which the file-patch plugin is referenced in a plugin pipeline.
UPDATE_VERSION_PLUGIN = "relcfg/update-version"
UPDATE_VERSION_PLUGIN_STEM = "update-version"

DEFAULT_GIT_ASSETS: tuple[str, ...] = ("CHANGELOG.md", "package.json", "package-lock.json")
DEFAULT_GIT_MESSAGE = "chore(release): ${nextRelease.version} [skip ci]\n\n${nextRelease.notes}"

# Evaluated in order; the first existing file wins.
RELEASE_CONFIG_FILES: tuple[str, ...] = (
    "release.config.js",
    "release.config.json",
    ".releaserc.js",
    ".releaserc.json",
    ".releaserc",
)
DEFAULT_RELEASE_CONFIG_FILE = ".releaserc.json"
PACKAGE_JSON = "package.json"
PACKAGE_RELEASE_KEY = "release"

NODE_VERSION_FILES: tuple[str, ...] = (".nvmrc", ".node-version")
DEFAULT_NODE_VERSION = "lts/*"
DEFAULT_BRANCH = "main"

WORKFLOW_DIR = (".github", "workflows")
WORKFLOW_FILE = "release.yml"
DEFAULT_WORKFLOW_NAME = "Release"
DEFAULT_TEST_COMMAND = "npm test"
DEFAULT_PERMISSIONS: tuple[tuple[str, str], ...] = (
    ("contents", "write"),
    ("id-token", "write"),
)

DATETIME_FORMATS: tuple[str, ...] = ("iso", "unix", "custom")
DEFAULT_DATETIME_FORMAT = "iso"
