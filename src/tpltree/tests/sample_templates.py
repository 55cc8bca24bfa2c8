"""Templates shared by the tests (and importable by the CLI tests)."""

from tpltree import (
    Array,
    Date,
    Html,
    If,
    InputText,
    Markdown,
    Number,
    Object,
    Text,
    index,
)


def heading(t):
    return t(["<h1>", "</h1>"], Text("heading"))


def recipe(t):
    return t.seq(
        "<h2>",
        Number(index, transform=lambda i: i + 1),
        '. <a href="',
        Text("url"),
        '">',
        Text("name"),
        "</a>",
        If("steps", content=t.seq('<div class="steps">', Markdown("steps"), "</div>")),
        " ",
        Date("createdat"),
        "</h2>",
    )


def layout(t):
    return t.seq(
        "<title>",
        Text("heading"),
        " (",
        Number("number"),
        ")</title>",
        Html("head"),
        "<h1>",
        Text("heading"),
        "</h1>",
        '<div class="description">',
        Markdown("description", default="_Some_ recipe"),
        "</div>",
        Array("recipes", content=recipe(t)),
        Object("user", content=t.seq("<p>User name: ", Text("name"), "</p>")),
    )


def not_empty(s):
    return None if s else "Required"


def max_length(n):
    def check(s):
        return f"At most {n} characters" if len(s) > n else None

    return check


def signup(t):
    return t.seq(
        "<form>",
        InputText("name", label="Name", check=not_empty, trim=True),
        InputText("email", label="Email", placeholder="you@example.com", check=not_empty),
        InputText("nick", label="Nickname", optional=True, check=max_length(8), default=""),
        InputText("bio", label="Bio", size=(60, 4), optional=True, check=max_length(20)),
        "</form>",
    )


def broken(t):
    return t.seq(Number("n", transform=lambda v: int("abc")))
