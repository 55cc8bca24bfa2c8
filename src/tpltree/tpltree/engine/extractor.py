"""Type extractor - infers the data shape a template requires.

Walks a tree without data. Fields are recorded in first-seen order; the
same field referenced twice with the same type is kept once, with a
different type it is a ContradictoryType error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Union

from tpltree.engine.kinds import DeclaredType, lookup
from tpltree.engine.tree import Container, LoopMarker, Template, Tree, build_tree
from tpltree.exceptions import ContradictoryType, InvalidDataKey, MissingContent

log = logging.getLogger(__name__)

INDENT = "  "


@dataclass
class FieldType:
    """Declared type of one field.

    ``type`` is a DeclaredType for leaves and a nested TypeDescription for
    array/object fields (``sequence`` is set for arrays).
    """

    type: Union[DeclaredType, "TypeDescription"]
    optional: bool = False
    sequence: bool = False

    @property
    def tag(self) -> DeclaredType:
        """Type tag used for consistency checks."""
        if isinstance(self.type, TypeDescription):
            return DeclaredType.ARRAY if self.sequence else DeclaredType.OBJECT
        return self.type

    def format(self) -> str:
        if isinstance(self.type, TypeDescription):
            return self.type.format() + ("[]" if self.sequence else "")
        return str(self.type)

    def to_dict(self) -> Any:
        if isinstance(self.type, TypeDescription):
            nested = self.type.to_dict()
            return [nested] if self.sequence else nested
        return str(self.type)


@dataclass
class TypeDescription:
    """Ordered mapping of field name to FieldType."""

    fields: Dict[str, FieldType] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.fields

    def __getitem__(self, name: str) -> FieldType:
        return self.fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def add(self, name: str, new: FieldType) -> None:
        """Record a field, merging with an earlier reference of the same name.

        Raises:
            ContradictoryType: If the earlier reference has another type
        """
        prev = self.fields.get(name)
        if prev is None:
            self.fields[name] = new
            return

        if prev.tag != new.tag:
            raise ContradictoryType(name, str(new.tag), str(prev.tag))

        # One required reference is enough to make the field required
        prev.optional = prev.optional and new.optional

        if isinstance(prev.type, TypeDescription) and isinstance(
            new.type, TypeDescription
        ):
            for sub_name, sub_type in new.type.fields.items():
                prev.type.add(sub_name, sub_type)

    def format(self) -> str:
        """Render as TypeScript-like interface text."""
        body = ""
        for name, ft in self.fields.items():
            mark = "?" if ft.optional else ""
            body += f"\n{name}{mark}: {ft.format()};"
        return "{" + body.replace("\n", "\n" + INDENT) + "\n}"

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested dict; optional fields get a trailing '?' on the name."""
        return {
            name + ("?" if ft.optional else ""): ft.to_dict()
            for name, ft in self.fields.items()
        }

    def __str__(self) -> str:
        return self.format()


def extract_tree_type(tree: Tree) -> TypeDescription:
    """Infer the type description of one tree level, recursing into content.

    Expressions keyed by a loop marker are skipped whole. That includes an
    if/unless on a marker, e.g. ``If(rindex, content=...)``: fields used only
    inside such content do not appear in the description.
    """
    description = TypeDescription()

    for exp in tree.expressions:
        key = exp.key
        if isinstance(key, LoopMarker):
            continue  # e.g. indexes
        if not isinstance(key, str):
            raise InvalidDataKey(key)

        spec = lookup(exp.kind)

        if exp.kind in ("if", "unless"):
            sub = _content_type(exp)
            for name, ft in sub.fields.items():
                ft.optional = True
                description.add(name, ft)

        elif exp.kind in ("array", "object"):
            description.add(
                key,
                FieldType(
                    type=_content_type(exp),
                    optional=exp.has_default,
                    sequence=exp.kind == "array",
                ),
            )

        else:
            description.add(
                key, FieldType(type=spec.declared_type, optional=exp.has_default)
            )

    return description


def _content_type(exp: Container) -> TypeDescription:
    if exp.content is None:
        raise MissingContent(exp.key, exp.kind)
    return extract_tree_type(exp.content)


def extract_type(template: Template) -> TypeDescription:
    """Infer the data shape required by a template definition.

    Raises:
        ContradictoryType: If two references to one field disagree on type
    """
    description = extract_tree_type(build_tree(template))
    log.debug("Extracted %d top-level fields", len(description))
    return description
