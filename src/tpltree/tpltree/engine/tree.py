"""Template tree - the neutral literal/expression model.

A template definition is a plain callable that receives a Collector and
returns whatever the collector produces:

    def heading(t):
        return t(["<h1>", "</h1>"], Text("heading"))

Every extraction and render builds the tree again from the definition.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Iterator, Optional, Sequence, Tuple, Union

from tpltree.exceptions import TemplateStructureError, UnknownKind

log = logging.getLogger(__name__)


class LoopMarker(Enum):
    """Special data keys resolved against the loop context instead of data."""

    INDEX = "index"
    RINDEX = "rindex"
    COUNT = "count"

    def __repr__(self) -> str:
        return f"<{self.value}>"

    def __str__(self) -> str:
        return self.value


index = LoopMarker.INDEX
rindex = LoopMarker.RINDEX
count = LoopMarker.COUNT

DataKey = Union[str, LoopMarker]


class _Missing:
    """Sentinel for "no default given"."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class Expression:
    """Base for a single templated placeholder.

    Subclasses set ``kind`` to the registry name of the kind they render.
    """

    kind: ClassVar[str] = ""

    key: DataKey
    default: Any = MISSING
    transform: Optional[Callable[[Any], Any]] = None
    check: Optional[Callable[[Any], Optional[str]]] = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @classmethod
    def from_dict(cls, d: Any) -> "Expression":
        """Build an expression from a mapping descriptor.

        The first key names the kind and its value is the data key, e.g.
        ``{"text": "heading", "default": "Untitled"}``.
        """
        if not isinstance(d, Mapping) or not d:
            raise TemplateStructureError(
                f"Expression descriptor must be a non-empty mapping, got {d!r}"
            )

        items = list(d.items())
        kind, key = items[0]
        expr_cls = EXPRESSION_TYPES.get(kind)
        if expr_cls is None:
            raise UnknownKind(kind)

        allowed = {f.name for f in dataclasses.fields(expr_cls)} - {"key"}
        opts = dict(items[1:])
        unknown = sorted(set(opts) - allowed)
        if unknown:
            raise TemplateStructureError(
                f"Unknown options for {kind} '{key}': {', '.join(map(str, unknown))}"
            )
        if "size" in opts:
            opts["size"] = tuple(opts["size"])

        return expr_cls(key=key, **opts)


@dataclass(frozen=True)
class Text(Expression):
    """Plain text, XML-escaped."""

    kind: ClassVar[str] = "text"


@dataclass(frozen=True)
class Html(Expression):
    """Trusted HTML, emitted as-is."""

    kind: ClassVar[str] = "html"


@dataclass(frozen=True)
class Markdown(Expression):
    kind: ClassVar[str] = "markdown"


@dataclass(frozen=True)
class Number(Expression):
    kind: ClassVar[str] = "number"


@dataclass(frozen=True)
class Date(Expression):
    kind: ClassVar[str] = "date"


@dataclass(frozen=True)
class Time(Expression):
    kind: ClassVar[str] = "time"


@dataclass(frozen=True)
class DateTime(Expression):
    kind: ClassVar[str] = "datetime"


@dataclass(frozen=True)
class InputText(Expression):
    """A form field: <input> when size[1] == 1, otherwise <textarea>."""

    kind: ClassVar[str] = "inputText"

    label: str = ""
    placeholder: str = ""
    size: Tuple[int, int] = (40, 1)  # (cols, rows)
    optional: bool = False
    trim: bool = False


@dataclass(frozen=True)
class Container(Expression):
    """An expression whose content is a nested tree."""

    content: Optional["Tree"] = None


@dataclass(frozen=True)
class Array(Container):
    """Renders content once per element, with a fresh loop context."""

    kind: ClassVar[str] = "array"


@dataclass(frozen=True)
class Object(Container):
    """Renders content against a nested record."""

    kind: ClassVar[str] = "object"


@dataclass(frozen=True)
class If(Container):
    kind: ClassVar[str] = "if"


@dataclass(frozen=True)
class Unless(Container):
    kind: ClassVar[str] = "unless"


EXPRESSION_TYPES: dict[str, type[Expression]] = {
    cls.kind: cls
    for cls in (
        Text,
        Html,
        Markdown,
        Number,
        Date,
        Time,
        DateTime,
        InputText,
        Array,
        Object,
        If,
        Unless,
    )
}


@dataclass(frozen=True)
class Tree:
    """Ordered literals interleaved with expressions.

    ``literals[i]`` precedes ``expressions[i]``; the last literal closes the
    tree, so there is always exactly one more literal than expressions.
    """

    literals: Tuple[str, ...]
    expressions: Tuple[Expression, ...]

    def __post_init__(self):
        if len(self.literals) != len(self.expressions) + 1:
            raise TemplateStructureError(
                f"Tree needs {len(self.expressions) + 1} literals for "
                f"{len(self.expressions)} expressions, got {len(self.literals)}"
            )

    def pairs(self) -> Iterator[Tuple[Expression, str]]:
        """Yield each expression with the literal that follows it."""
        return zip(self.expressions, self.literals[1:])


def _coerce_expression(exp: Any) -> Expression:
    if isinstance(exp, Expression):
        return exp
    return Expression.from_dict(exp)


class Collector:
    """The capability handed to a template definition.

    Calling it reifies a literal list plus aligned expressions into a Tree,
    verbatim. ``seq`` takes the same parts in reading order instead.
    """

    def __call__(self, literals: Sequence[str], *expressions: Any) -> Tree:
        if isinstance(literals, str):
            literals = [literals]
        return Tree(
            literals=tuple(literals),
            expressions=tuple(_coerce_expression(e) for e in expressions),
        )

    def seq(self, *parts: Any) -> Tree:
        """Build a tree from strings and expressions in reading order.

        Adjacent strings are joined and an empty literal is inserted between
        adjacent expressions, so ``t.seq("<h1>", Text("x"), "</h1>")`` equals
        ``t(["<h1>", "</h1>"], Text("x"))``.
        """
        literals = [""]
        expressions = []
        for part in parts:
            if isinstance(part, str):
                literals[-1] += part
            else:
                expressions.append(part)
                literals.append("")
        return self(literals, *expressions)


Template = Callable[[Collector], Tree]


def build_tree(template: Template) -> Tree:
    """Invoke a template definition with a fresh collector."""
    tree = template(Collector())
    if not isinstance(tree, Tree):
        raise TemplateStructureError(
            f"Template must return the collector's result, got {type(tree).__name__}"
        )
    log.debug("Built tree with %d expressions", len(tree.expressions))
    return tree
