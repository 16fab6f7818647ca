"""HTML escaping for result text."""

_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&#34;",
        "'": "&#39;",
    }
)


def escape_html(text: str) -> str:
    """
    Escape the five HTML special characters in a result text.

    Quotes become decimal references (&#34; and &#39;).

    Args:
        text: Raw text taken from a page or an error

    Returns:
        Escaped text, e.g. ``"a & 'b'"`` -> ``"a &amp; &#39;b&#39;"``
    """
    return text.translate(_ESCAPES)
