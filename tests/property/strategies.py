"""Hypothesis strategies for property-based testing.

This module defines strategies for generating accessor names, property
names and small class declarations for the splurge-property-model library.
"""

import keyword

from hypothesis import strategies as st

ascii_letters = st.characters(min_codepoint=ord("A"), max_codepoint=ord("z")).filter(str.isalpha)

# Names made of ASCII letters only, like camelCase property names.
letter_names = st.text(alphabet=ascii_letters, min_size=1, max_size=20)

# Lowercase identifiers usable as field names in generated source.
field_names = st.from_regex(r"[a-z][a-z0-9]{0,8}", fullmatch=True).filter(lambda name: not keyword.iskeyword(name))


@st.composite
def distinct_field_names(draw, min_size: int = 1, max_size: int = 8) -> list[str]:
    """Generate a list of unique field names."""
    return draw(st.lists(field_names, min_size=min_size, max_size=max_size, unique=True))


def class_source(name: str, fields: list[str], base: str | None = None) -> str:
    """Render a class declaring ``fields`` as ``int`` annotations."""
    header = f"class {name}({base}):" if base else f"class {name}:"
    body = [f"    {field}: int" for field in fields] or ["    pass"]
    return "\n".join([header, *body, ""])


@st.composite
def parent_and_child_fields(draw) -> tuple[list[str], list[str]]:
    """Generate disjoint field lists for a parent and a child class."""
    names = draw(distinct_field_names(min_size=2, max_size=10))
    split = draw(st.integers(min_value=1, max_value=len(names) - 1))
    return names[:split], names[split:]
