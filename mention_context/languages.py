"""Language detection by extension and the optimizer's language ranking."""

from pathlib import PurePosixPath

DEFAULT_LANGUAGE = "text"

EXTENSION_LANGUAGES: dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "py": "python",
    "pyi": "python",
    "java": "java",
    "cpp": "cpp",
    "cc": "cpp",
    "hpp": "cpp",
    "c": "c",
    "h": "c",
    "go": "go",
    "rs": "rust",
    "rb": "ruby",
    "php": "php",
    "html": "html",
    "css": "css",
    "json": "json",
    "md": "markdown",
    "yml": "yaml",
    "yaml": "yaml",
}

# Higher ranks are kept longest when files must be dropped.
LANGUAGE_PRIORITY: dict[str, int] = {
    "typescript": 10,
    "javascript": 9,
    "python": 8,
    "java": 7,
    "cpp": 6,
    "c": 6,
    "go": 6,
    "rust": 6,
    "json": 5,
    "yaml": 4,
    "markdown": 3,
    "text": 1,
}


def detect_language(path: str) -> str:
    """Map a file path to a language name by its extension."""
    suffix = PurePosixPath(path.replace("\\", "/")).suffix.lower().lstrip(".")
    return EXTENSION_LANGUAGES.get(suffix, DEFAULT_LANGUAGE)


def language_priority(language: str | None) -> int:
    return LANGUAGE_PRIORITY.get(language or DEFAULT_LANGUAGE, 1)
