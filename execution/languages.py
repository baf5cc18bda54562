from types import MappingProxyType

from execution.errors import UnsupportedLanguage

# Judge0 CE language ids. These must match the provider exactly.
LANGUAGE_IDS = MappingProxyType(
    {
        "javascript": 63,  # Node.js 12.14.0
        "python": 71,  # Python 3.8.1
        "cpp": 54,  # C++ (GCC 9.2.0)
        "c": 50,  # C (GCC 9.2.0)
        "java": 62,  # Java (OpenJDK 13.0.1)
        "csharp": 51,  # C# (Mono 6.6.0.161)
        "go": 60,  # Go 1.13.5
        "rust": 73,  # Rust 1.40.0
        "php": 68,  # PHP 7.4.1
        "ruby": 72,  # Ruby 2.7.0
        "swift": 83,  # Swift 5.2.3
        "kotlin": 78,  # Kotlin 1.3.70
        "typescript": 74,  # TypeScript 3.7.4
    }
)


def supported_languages() -> list[str]:
    return list(LANGUAGE_IDS.keys())


def resolve_language_id(language: str) -> int:
    """
    Map a language key (case-insensitive) to its Judge0 id.
    Raises UnsupportedLanguage for anything outside the table.
    """
    language_id = LANGUAGE_IDS.get(language.strip().lower())
    if language_id is None:
        raise UnsupportedLanguage(language, supported_languages())
    return language_id
