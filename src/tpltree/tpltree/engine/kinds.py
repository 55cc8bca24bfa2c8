"""Expression kind registry.

Maps each kind name to its declared type (used by the type extractor) and
its render function ``(value, ctx) -> str``. Container kinds only carry a
declared type; the renderer walks their content itself.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

import markdown as markdown_lib
from jinja2 import Environment

from tpltree.config import DEFAULT_CONFIG, EngineConfig, LocaleSettings
from tpltree.engine.tree import DataKey, Expression
from tpltree.exceptions import TemplateStructureError, UnknownKind


class DeclaredType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "Date"
    ARRAY = "[]"
    OBJECT = "{}"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


@dataclass
class RenderContext:
    """Everything a render function may need besides the value itself."""

    expression: Expression
    data: Any
    key: DataKey
    check_result: Optional[str] = None
    config: EngineConfig = field(default_factory=lambda: DEFAULT_CONFIG)


RenderFn = Callable[[Any, RenderContext], str]


@dataclass(frozen=True)
class KindSpec:
    declared_type: DeclaredType
    render: Optional[RenderFn] = None


# =============================================================================
# Escaping
# =============================================================================

_XML_ESCAPES = str.maketrans(
    {"<": "&lt;", ">": "&gt;", "&": "&amp;", "'": "&apos;", '"': "&quot;"}
)


def xmlesc(s: Any) -> str:
    """Escape <>&'" to their entity forms."""
    return str(s).translate(_XML_ESCAPES)


# =============================================================================
# Formatters
# =============================================================================


def format_number(n: Any, locale: LocaleSettings) -> str:
    """Group thousands and cap fraction digits like toLocaleString()."""
    if isinstance(n, bool) or not isinstance(n, (int, float)):
        return str(n)
    if isinstance(n, int) or n.is_integer():
        text = f"{int(n):,}"
    else:
        text = f"{n:,.{locale.max_fraction_digits}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
    # Swap through a placeholder so "," and "." can trade places
    return (
        text.replace(",", "\0")
        .replace(".", locale.decimal_sep)
        .replace("\0", locale.thousands_sep)
    )


def _date_fields(value: Any, need_date: bool = False) -> dict[str, Any]:
    if isinstance(value, dt.datetime):
        d, t = value.date(), value.time()
    elif isinstance(value, dt.date):
        d, t = value, dt.time()
    elif isinstance(value, dt.time):
        d, t = None, value
    else:
        raise TemplateStructureError(
            f"Expected a date, time or datetime, got {type(value).__name__}"
        )

    fields: dict[str, Any] = {
        "hour": t.hour,
        "hour12": t.hour % 12 or 12,
        "minute": t.minute,
        "second": t.second,
        "ampm": "AM" if t.hour < 12 else "PM",
    }
    if d is None:
        if need_date:
            raise TemplateStructureError(
                f"Expected a date or datetime, got {type(value).__name__}"
            )
    else:
        fields.update(year=d.year, month=d.month, day=d.day)
    return fields


def format_date(value: Any, locale: LocaleSettings) -> str:
    return locale.date_format.format(**_date_fields(value, need_date=True))


def format_time(value: Any, locale: LocaleSettings) -> str:
    return locale.time_format.format(**_date_fields(value))


def format_datetime(value: Any, locale: LocaleSettings) -> str:
    fields = _date_fields(value, need_date=True)
    return locale.datetime_format.format(
        date=locale.date_format.format(**fields),
        time=locale.time_format.format(**fields),
        **fields,
    )


# =============================================================================
# Form fields
# =============================================================================

_env = Environment(autoescape=False, keep_trailing_newline=False)
_env.filters["xmlesc"] = xmlesc

INPUT_TEXT_TEMPLATE = _env.from_string(
    '<div class="formfield {{ "optional" if exp.optional else "mandatory" }} '
    '{{ "ok" if check_result is none else "error" }}">'
    '<label for="{{ exp.key }}">{{ exp.label }}</label>'
    "{% if exp.size[1] == 1 %}"
    '<input type="text" name="{{ exp.key }}" placeholder="{{ exp.placeholder | xmlesc }}" '
    'cols="{{ exp.size[0] }}" rows="{{ exp.size[1] }}" value="{{ value | xmlesc }}">'
    "{% else %}"
    '<textarea name="{{ exp.key }}" cols="{{ exp.size[0] }}" rows="{{ exp.size[1] }}">'
    "{{ value | xmlesc }}</textarea>"
    "{% endif %}"
    "{% if check_result is not none %}"
    '<div class="formerror">{{ check_result }}</div>'
    "{% endif %}"
    "</div>"
)


def render_input_text(value: Any, ctx: RenderContext) -> str:
    return INPUT_TEXT_TEMPLATE.render(
        exp=ctx.expression, value=value, check_result=ctx.check_result
    )


# =============================================================================
# Registry
# =============================================================================

_KINDS: dict[str, KindSpec] = {
    "text": KindSpec(DeclaredType.STRING, lambda s, ctx: xmlesc(s)),
    "html": KindSpec(DeclaredType.STRING, lambda s, ctx: str(s)),
    "markdown": KindSpec(
        DeclaredType.STRING,
        lambda s, ctx: markdown_lib.markdown(
            str(s), extensions=ctx.config.markdown_extensions
        ),
    ),
    "number": KindSpec(
        DeclaredType.NUMBER, lambda n, ctx: format_number(n, ctx.config.locale)
    ),
    "date": KindSpec(
        DeclaredType.DATE, lambda d, ctx: format_date(d, ctx.config.locale)
    ),
    "time": KindSpec(
        DeclaredType.DATE, lambda d, ctx: format_time(d, ctx.config.locale)
    ),
    "datetime": KindSpec(
        DeclaredType.DATE, lambda d, ctx: format_datetime(d, ctx.config.locale)
    ),
    "inputText": KindSpec(DeclaredType.STRING, render_input_text),
    # used for deduplication, consistency-checking, types
    "array": KindSpec(DeclaredType.ARRAY),
    "object": KindSpec(DeclaredType.OBJECT),
    "if": KindSpec(DeclaredType.NONE),
    "unless": KindSpec(DeclaredType.NONE),
}


def lookup(kind: str) -> KindSpec:
    """Get the registry entry for a kind name."""
    spec = _KINDS.get(kind)
    if spec is None:
        raise UnknownKind(kind)
    return spec


def kind_names() -> list[str]:
    return list(_KINDS)
