"""Tests for the expression kind registry and its formatters."""

from datetime import date, datetime, time

import pytest

from tpltree.config import EngineConfig, LocaleSettings
from tpltree.engine.kinds import (
    DeclaredType,
    RenderContext,
    format_date,
    format_datetime,
    format_number,
    format_time,
    kind_names,
    lookup,
    xmlesc,
)
from tpltree.engine.tree import InputText, Markdown, Text
from tpltree.exceptions import TemplateStructureError, UnknownKind

LOCALE = LocaleSettings()


def ctx_for(exp, check_result=None):
    return RenderContext(expression=exp, data={}, key=exp.key, check_result=check_result)


def test_registry_covers_closed_kind_set():
    assert kind_names() == [
        "text",
        "html",
        "markdown",
        "number",
        "date",
        "time",
        "datetime",
        "inputText",
        "array",
        "object",
        "if",
        "unless",
    ]


def test_declared_types():
    assert lookup("text").declared_type == DeclaredType.STRING
    assert lookup("number").declared_type == DeclaredType.NUMBER
    assert lookup("datetime").declared_type == DeclaredType.DATE
    assert lookup("array").declared_type == DeclaredType.ARRAY
    assert lookup("object").declared_type == DeclaredType.OBJECT
    assert lookup("if").declared_type == DeclaredType.NONE
    assert lookup("array").render is None


def test_unknown_kind():
    with pytest.raises(UnknownKind, match="marquee"):
        lookup("marquee")


def test_text_escapes_and_html_does_not():
    raw = "<b>&\"'"
    assert lookup("text").render(raw, ctx_for(Text("x"))) == "&lt;b&gt;&amp;&quot;&apos;"
    assert lookup("html").render(raw, ctx_for(Text("x"))) == raw


def test_xmlesc_stringifies():
    assert xmlesc(5) == "5"


def test_markdown_is_converted_unescaped():
    out = lookup("markdown").render("**Important** information", ctx_for(Markdown("d")))
    assert out == "<p><strong>Important</strong> information</p>"


def test_number_grouping():
    assert format_number(1234567, LOCALE) == "1,234,567"
    assert format_number(-1000, LOCALE) == "-1,000"
    assert format_number(1234.5, LOCALE) == "1,234.5"
    assert format_number(2.0, LOCALE) == "2"
    assert format_number(2 / 3, LOCALE) == "0.667"


def test_number_with_other_separators():
    de = LocaleSettings(thousands_sep=".", decimal_sep=",")
    assert format_number(1234567.25, de) == "1.234.567,25"


def test_date_time_formats():
    assert format_date(date(2026, 10, 19), LOCALE) == "10/19/2026"
    assert format_time(time(9, 5, 3), LOCALE) == "9:05:03 AM"
    assert format_time(time(0, 0, 0), LOCALE) == "12:00:00 AM"
    assert format_time(time(12, 30, 0), LOCALE) == "12:30:00 PM"
    assert (
        format_datetime(datetime(2026, 10, 19, 21, 5, 3), LOCALE)
        == "10/19/2026, 9:05:03 PM"
    )


def test_date_of_plain_date_is_midnight():
    assert format_datetime(date(2026, 1, 2), LOCALE) == "1/2/2026, 12:00:00 AM"


def test_input_text_single_line():
    exp = InputText("name", label="Name", placeholder="Your <name>")
    out = lookup("inputText").render("Bob & co", ctx_for(exp))
    assert out == (
        '<div class="formfield mandatory ok"><label for="name">Name</label>'
        '<input type="text" name="name" placeholder="Your &lt;name&gt;" '
        'cols="40" rows="1" value="Bob &amp; co"></div>'
    )


def test_input_text_textarea_with_error():
    exp = InputText("bio", label="Bio", size=(60, 4), optional=True)
    out = lookup("inputText").render("<hi>", ctx_for(exp, check_result="Too short"))
    assert out == (
        '<div class="formfield optional error"><label for="bio">Bio</label>'
        '<textarea name="bio" cols="60" rows="4">&lt;hi&gt;</textarea>'
        '<div class="formerror">Too short</div></div>'
    )


def test_render_context_defaults_to_engine_defaults():
    """A context built without a config formats with the default settings."""
    ctx = ctx_for(Text("x"))
    assert ctx.config == EngineConfig()
    assert ctx.config.locale.thousands_sep == ","


def test_number_without_fraction_digits_keeps_integer_zeros():
    whole = LocaleSettings(max_fraction_digits=0)
    assert format_number(1229.6, whole) == "1,230"
    assert format_number(1000.4, whole) == "1,000"
    assert format_number(100.5, LOCALE) == "100.5"


def test_date_kinds_need_a_date_part():
    with pytest.raises(TemplateStructureError, match="date or datetime"):
        format_date(time(9, 5), LOCALE)
    with pytest.raises(TemplateStructureError, match="date or datetime"):
        format_datetime(time(9, 5), LOCALE)
    assert format_time(time(9, 5), LOCALE) == "9:05:00 AM"
