"""
Configuration constants for the Encceja Report Reader.
"""

from pathlib import Path


# Model providers
# Available providers: "openai", "gemini"
DEFAULT_PROVIDER: str = "openai"
OPENAI_MODEL: str = "gpt-4o-mini"
GEMINI_MODEL: str = "gemini-2.5-flash"
MAX_TOKENS: int = 1024

# Credentials
OPENAI_API_KEY_ENV: str = "OPENAI_API_KEY"
GEMINI_API_KEY_ENV: str = "GEMINI_API_KEY"
GENERIC_API_KEY_ENV: str = "API_KEY"
NETRC_MACHINE: str = "OPENAI"

# Grade fields as named in the model's JSON response
OBJECTIVE_GRADE_FIELDS: list[str] = ["naturalSciences", "humanSciences", "languages", "mathematics"]
ESSAY_GRADE_FIELD: str = "essay"
GRADE_FIELDS: list[str] = OBJECTIVE_GRADE_FIELDS + [ESSAY_GRADE_FIELD]

# Encceja approval rule
OBJECTIVE_PASSING_SCORE: float = 100
ESSAY_PASSING_SCORE: float = 5

# Person-name heuristic: token count range for "looks like a name"
PERSON_NAME_MIN_TOKENS: int = 2
PERSON_NAME_MAX_TOKENS: int = 4

# Input files
MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
}

# Default paths (can be overridden via config)
DEFAULT_CONFIG_PATH: Path = Path("reader_config.yml")
DEFAULT_OUTPUT_DIR: Path = Path("results")
RESULTS_SUMMARY_FILENAME: str = "results_summary.json"
RESULTS_CSV_FILENAME: str = "results_summary.csv"
