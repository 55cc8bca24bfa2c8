"""tpltree - typed HTML templates

Templates are trees of literal text and typed expressions. The same tree
renders against a data record or yields the shape of data it needs.
"""

# Engine (core abstractions)
from tpltree.engine import (
    CheckResult,
    TypeDescription,
    build_tree,
    check_render,
    extract_type,
    render,
)
from tpltree.engine.tree import (
    Array,
    Date,
    DateTime,
    Html,
    If,
    InputText,
    Markdown,
    Number,
    Object,
    Text,
    Time,
    Unless,
    count,
    index,
    rindex,
)
from tpltree.config import EngineConfig, LocaleSettings
from tpltree.exceptions import (
    ContradictoryType,
    InvalidDataKey,
    MissingContent,
    MissingData,
    TemplateStructureError,
    TplTreeError,
    UnknownKind,
)

__version__ = "0.1.0"

__all__ = [
    # Operations
    "build_tree",
    "extract_type",
    "render",
    "check_render",
    "CheckResult",
    "TypeDescription",
    # Expression kinds
    "Text",
    "Html",
    "Markdown",
    "Number",
    "Date",
    "Time",
    "DateTime",
    "InputText",
    "Array",
    "Object",
    "If",
    "Unless",
    # Loop markers
    "index",
    "rindex",
    "count",
    # Config
    "EngineConfig",
    "LocaleSettings",
    # Errors
    "TplTreeError",
    "ContradictoryType",
    "MissingContent",
    "UnknownKind",
    "InvalidDataKey",
    "MissingData",
    "TemplateStructureError",
]
