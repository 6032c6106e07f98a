"""Language and file-extension tables.

Three lookups drive path handling:
- which extensions a language tag accepts when matching prose hints
- which extension a fallback name gets for a language tag
- which language a path implies when the fence carried no tag
"""

from __future__ import annotations

# File names that are commonly used without an extension
EXTENSIONLESS_NAMES = frozenset(
    {
        "Dockerfile",
        "Makefile",
        "Procfile",
        "Gemfile",
        "Rakefile",
        "Jenkinsfile",
        "Vagrantfile",
    }
)

# Language tag -> accepted extensions (lowercase, without dot) or extensionless names
LANGUAGE_EXTENSIONS: dict[str, frozenset[str]] = {
    "javascript": frozenset({"js", "mjs", "cjs", "jsx"}),
    "js": frozenset({"js", "mjs", "cjs", "jsx"}),
    "jsx": frozenset({"jsx", "js"}),
    "typescript": frozenset({"ts", "tsx", "mts", "cts"}),
    "ts": frozenset({"ts", "tsx", "mts", "cts"}),
    "tsx": frozenset({"tsx", "ts"}),
    "python": frozenset({"py", "pyw", "pyi"}),
    "py": frozenset({"py", "pyw", "pyi"}),
    "java": frozenset({"java"}),
    "kotlin": frozenset({"kt", "kts"}),
    "c": frozenset({"c", "h"}),
    "cpp": frozenset({"cpp", "hpp", "cc", "cxx", "hh", "h"}),
    "c++": frozenset({"cpp", "hpp", "cc", "cxx", "hh", "h"}),
    "csharp": frozenset({"cs"}),
    "cs": frozenset({"cs"}),
    "go": frozenset({"go"}),
    "rust": frozenset({"rs"}),
    "rs": frozenset({"rs"}),
    "php": frozenset({"php"}),
    "ruby": frozenset({"rb", "Gemfile", "Rakefile"}),
    "rb": frozenset({"rb", "Gemfile", "Rakefile"}),
    "swift": frozenset({"swift"}),
    "html": frozenset({"html", "htm"}),
    "css": frozenset({"css"}),
    "scss": frozenset({"scss"}),
    "sass": frozenset({"sass"}),
    "less": frozenset({"less"}),
    "json": frozenset({"json", "jsonc"}),
    "markdown": frozenset({"md", "markdown"}),
    "md": frozenset({"md", "markdown"}),
    "xml": frozenset({"xml", "xsd", "svg"}),
    "yaml": frozenset({"yaml", "yml"}),
    "yml": frozenset({"yaml", "yml"}),
    "toml": frozenset({"toml"}),
    "ini": frozenset({"ini", "cfg"}),
    "bash": frozenset({"sh", "bash"}),
    "sh": frozenset({"sh", "bash"}),
    "shell": frozenset({"sh", "bash", "zsh"}),
    "zsh": frozenset({"zsh", "sh"}),
    "powershell": frozenset({"ps1", "psm1"}),
    "sql": frozenset({"sql"}),
    "vue": frozenset({"vue"}),
    "svelte": frozenset({"svelte"}),
    "dockerfile": frozenset({"Dockerfile", "dockerfile"}),
    "docker": frozenset({"Dockerfile", "dockerfile"}),
    "makefile": frozenset({"Makefile", "mk"}),
    "make": frozenset({"Makefile", "mk"}),
    "lua": frozenset({"lua"}),
    "r": frozenset({"r"}),
    "scala": frozenset({"scala"}),
    "dart": frozenset({"dart"}),
    "graphql": frozenset({"graphql", "gql"}),
    "proto": frozenset({"proto"}),
    "protobuf": frozenset({"proto"}),
    "hcl": frozenset({"tf", "hcl"}),
    "terraform": frozenset({"tf", "hcl"}),
}

# Language tag -> extension used for synthesized fallback names
DEFAULT_EXTENSIONS: dict[str, str] = {
    "javascript": "js",
    "js": "js",
    "jsx": "jsx",
    "typescript": "ts",
    "ts": "ts",
    "tsx": "tsx",
    "python": "py",
    "py": "py",
    "java": "java",
    "kotlin": "kt",
    "c": "c",
    "cpp": "cpp",
    "c++": "cpp",
    "csharp": "cs",
    "cs": "cs",
    "go": "go",
    "rust": "rs",
    "rs": "rs",
    "php": "php",
    "ruby": "rb",
    "rb": "rb",
    "swift": "swift",
    "html": "html",
    "css": "css",
    "scss": "scss",
    "sass": "sass",
    "less": "less",
    "json": "json",
    "markdown": "md",
    "md": "md",
    "xml": "xml",
    "yaml": "yaml",
    "yml": "yml",
    "toml": "toml",
    "ini": "ini",
    "bash": "sh",
    "sh": "sh",
    "shell": "sh",
    "zsh": "zsh",
    "powershell": "ps1",
    "sql": "sql",
    "vue": "vue",
    "svelte": "svelte",
    "dockerfile": "dockerfile",
    "docker": "dockerfile",
    "makefile": "mk",
    "make": "mk",
    "lua": "lua",
    "r": "r",
    "scala": "scala",
    "dart": "dart",
    "graphql": "graphql",
    "proto": "proto",
    "protobuf": "proto",
    "hcl": "tf",
    "terraform": "tf",
    "text": "txt",
    "txt": "txt",
    "plaintext": "txt",
}

# Extension (lowercase) or extensionless name -> language tag
EXTENSION_LANGUAGES: dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "mts": "typescript",
    "cts": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "py": "python",
    "pyw": "python",
    "pyi": "python",
    "java": "java",
    "kt": "kotlin",
    "kts": "kotlin",
    "c": "c",
    "h": "c",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "hpp": "cpp",
    "hh": "cpp",
    "cs": "csharp",
    "go": "go",
    "rs": "rust",
    "php": "php",
    "rb": "ruby",
    "swift": "swift",
    "html": "html",
    "htm": "html",
    "css": "css",
    "scss": "scss",
    "sass": "sass",
    "less": "less",
    "json": "json",
    "jsonc": "json",
    "md": "markdown",
    "markdown": "markdown",
    "xml": "xml",
    "svg": "xml",
    "yaml": "yaml",
    "yml": "yaml",
    "toml": "toml",
    "ini": "ini",
    "cfg": "ini",
    "sh": "bash",
    "bash": "bash",
    "zsh": "zsh",
    "ps1": "powershell",
    "sql": "sql",
    "vue": "vue",
    "svelte": "svelte",
    "lua": "lua",
    "r": "r",
    "scala": "scala",
    "dart": "dart",
    "graphql": "graphql",
    "gql": "graphql",
    "proto": "proto",
    "tf": "hcl",
    "hcl": "hcl",
    "txt": "text",
    "Dockerfile": "dockerfile",
    "dockerfile": "dockerfile",
    "Makefile": "makefile",
    "mk": "makefile",
    "Gemfile": "ruby",
    "Rakefile": "ruby",
    "Procfile": "text",
    "Jenkinsfile": "groovy",
    "Vagrantfile": "ruby",
}

FALLBACK_EXTENSION = "txt"
FALLBACK_LANGUAGE = "text"


def path_extension(path: str) -> str:
    """Return the extension key of a path.

    Extensionless names (Dockerfile, Makefile, ...) are returned as-is;
    otherwise the text after the last dot of the file name, lowercased.
    Returns an empty string when the file name has no extension.
    """
    name = path.rpartition("/")[2]
    if name in EXTENSIONLESS_NAMES:
        return name
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return ""
    return ext.lower()


def is_known_language(language: str) -> bool:
    return language in LANGUAGE_EXTENSIONS


def accepts_extension(language: str, path: str) -> bool:
    """Check whether a path's extension is consistent with a language tag.

    Unknown or empty language tags accept every path.
    """
    allowed = LANGUAGE_EXTENSIONS.get(language)
    if allowed is None:
        return True
    return path_extension(path) in allowed


def extension_for_language(language: str) -> str:
    """Extension for a synthesized file name ("txt" for unknown tags)."""
    return DEFAULT_EXTENSIONS.get(language, FALLBACK_EXTENSION)


def language_for_path(path: str) -> str:
    """Language implied by a path's extension ("text" when unknown)."""
    return EXTENSION_LANGUAGES.get(path_extension(path), FALLBACK_LANGUAGE)
