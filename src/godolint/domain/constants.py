"""
Conventions, thresholds and vocabularies shared by the rule catalog.
"""

GODOLINT_BANNER: str = "godolint :: Go convention & architecture audit"

# Style / size limits
MAX_FUNCTION_STATEMENTS: int = 50
MAX_PARAMETERS: int = 5
MAX_RESULTS: int = 3
MAX_STRUCT_FIELDS: int = 10
MAX_INTERFACE_METHODS: int = 5

INTERFACE_FILE_SUFFIX: str = "interfaces.go"
INTERFACE_NAME_SUFFIXES: tuple[str, ...] = ("er", "Service")
STORAGE_TYPE_SUFFIXES: tuple[str, ...] = ("Store", "Repository")
DOMAIN_PACKAGE_SEGMENT: str = "domain"

# Logging vocabulary
LOG_LEVELS: frozenset[str] = frozenset({"Error", "Info", "Debug", "Warn", "Fatal"})
LOG_CALL_PREFIX: str = "Log"
CONTEXT_TERMS: tuple[str, ...] = ("ctx", "context", "correlation", "request_id")
SENSITIVE_TERMS: tuple[str, ...] = (
    "password",
    "token",
    "secret",
    "key",
    "auth",
    "credential",
    "private",
    "cert",
    "ssh",
)

# Error wrapping vocabulary
WRAP_CALL_NAMES: frozenset[str] = frozenset({"Wrap", "Wrapf", "WithStack", "WithMessage"})
WRAP_CALL_PREFIX: str = "Wrap"

# Layer packages, matched as directory fragments
API_LAYER: str = "internal/api"
HANDLER_PACKAGE: str = "internal/api/handler"
MIDDLEWARE_PACKAGE: str = "internal/api/middleware"
STORAGE_LAYER: str = "internal/storage"
SERVICE_LAYER: str = "internal/service"
STORAGE_IMPORT_TERM: str = "storage"
SERVICE_SUFFIX: str = "Service"
STORE_SUFFIX: str = "Store"
DTO_SUFFIXES: tuple[str, ...] = ("Request", "Response")
HTTP_PACKAGE: str = "http"
MIDDLEWARE_RESULT_TYPES: frozenset[str] = frozenset({"HandlerFunc", "Handler"})
BRANCH_STATEMENTS: frozenset[str] = frozenset(
    {"if_statement", "for_statement", "expression_switch_statement", "type_switch_statement"}
)

# Task normalisation
TASK_TYPE_SUFFIX: str = "Task"
TASK_FIELD_RENAMES: dict[str, str] = {"Content": "Title", "Done": "Completed"}
TASK_TIME_FIELDS: frozenset[str] = frozenset({"CreatedAt", "UpdatedAt"})
UNIX_TIMESTAMP_TYPE: str = "int64"

# Layer import rules: directory fragment -> import fragments it may not use
DEFAULT_LAYER_RULES: dict[str, tuple[str, ...]] = {
    "internal/api": ("internal/storage",),
    "internal/service": ("internal/api",),
}

# Interface contracts: trigger method -> methods the full contract requires
DEFAULT_CONTRACTS: dict[str, tuple[str, ...]] = {
    "BeginTx": (
        "BeginTx",
        "CreateTask",
        "GetTask",
        "ListTasks",
        "UpdateTask",
        "DeleteTask",
        "Close",
    ),
    "GetWindow": ("GetWindow", "Show", "Hide", "Close"),
}

STORE_INTERFACE_METHODS: tuple[str, ...] = ("BeginTx", "Close")

DEFAULT_EXCLUDE_PATHS: tuple[str, ...] = ("vendor/", "testdata/")

# Go predeclared types used by the syntactic resolver
GO_BASIC_TYPES: frozenset[str] = frozenset(
    {
        "bool",
        "byte",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "any",
    }
)
