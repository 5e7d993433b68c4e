"""
HTML-to-Text Converter
A tag-driven reducer from HTML markup to readable plain text.

This is deliberately not a DOM parse: an ordered list of case-insensitive
regex substitutions runs over the whole document, then entities are
unescaped and blank lines collapsed. It never fails; malformed markup just
leaves stray text behind.
"""

import html
import re

# Order matters: later rules assume the earlier ones already ran
HTML_RULES = [
    (re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL), ""),
    (re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL), ""),
    (re.compile(r"<br\s*/?>", re.IGNORECASE), "\n"),
    (re.compile(r"</p>", re.IGNORECASE), "\n\n"),
    (re.compile(r"</div>", re.IGNORECASE), "\n"),
    (re.compile(r"</tr>", re.IGNORECASE), "\n"),
    (re.compile(r"<li>", re.IGNORECASE), "\n- "),
    (re.compile(r"</h[1-6]>", re.IGNORECASE), "\n\n"),
    (re.compile(r"<[^>]+>"), ""),
]


def html_to_text(content: str) -> str:
    """
    Reduce HTML to plain text

    Example:
        >>> html_to_text("<p>Hello<br>World</p><p>Bye</p>")
        'Hello\\nWorld\\n\\nBye'
    """
    for pattern, replacement in HTML_RULES:
        content = pattern.sub(replacement, content)

    content = html.unescape(content)
    return collapse_blank_lines(content)


def collapse_blank_lines(text: str) -> str:
    """Strip trailing whitespace per line and keep at most one blank line in a row"""
    cleaned = []
    previous_blank = False
    for line in text.split("\n"):
        line = line.rstrip(" \t")
        is_blank = not line.strip()
        if not (is_blank and previous_blank):
            cleaned.append(line)
        previous_blank = is_blank

    return "\n".join(cleaned).strip()
