"""Example: a recipe listing page and a feedback form.

Demonstrates arrays with loop markers, nested objects, conditionals,
defaults, and a validating form render.
"""

from datetime import datetime

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
    check_render,
    extract_type,
    index,
    render,
)


def recipe(t):
    return t.seq(
        "\n  <h2>\n    ",
        Number(index, transform=lambda i: i + 1),
        '.\n    <a href="',
        Text("url"),
        '">',
        Text("name"),
        "</a>\n    ",
        If("steps", content=t.seq('<div class="steps">', Markdown("steps"), "</div>")),
        "\n    ",
        Date("createdat"),
        "\n  </h2>",
    )


def layout(t):
    return t.seq(
        "<html>\n<head>\n  <title>",
        Text("heading"),
        " (",
        Number("number"),
        ")</title>\n  ",
        Html("head"),
        "\n</head>\n<body>\n  <h1>",
        Text("heading"),
        '</h1>\n  <div class="description">',
        Markdown("description", default="_Some_ recipe"),
        "</div>",
        Array("recipes", content=recipe(t)),
        "\n  ",
        Object("user", content=t.seq("<p>User name: ", Text("name"), "</p>")),
        "\n</body>\n</html>",
    )


def not_empty(s):
    return None if s else "Please fill this in"


def feedback(t):
    return t.seq(
        "<form>",
        InputText("name", label="Name", placeholder="Your name", check=not_empty, trim=True),
        InputText(
            "comment",
            label="Comment",
            size=(60, 5),
            optional=True,
        ),
        "</form>",
    )


data = {
    "heading": "Beans & cheese",
    "number": 1234567,
    "head": '<meta charset="utf-8">',
    "description": "**Important** information",
    "recipes": [
        {"url": "bread", "name": "Bread", "createdat": datetime.now()},
        {
            "url": "sausage-pasta",
            "name": "Sausage Pasta",
            "createdat": datetime.now(),
            "steps": "Do this, then do that",
        },
    ],
    "user": {"name": "George"},
}

print("=" * 60)
print("TYPES")
print("=" * 60)
print(extract_type(layout))

print("=" * 60)
print("RENDER")
print("=" * 60)
print(render(layout, data))

print("=" * 60)
print("FORM CHECK")
print("=" * 60)
result = check_render(feedback, {"name": "   ", "comment": "Nice"})
print(result.output)
print(f"failed checks: {result.failed_checks}")
