"""
Reading-time estimates for post content.

Posts store a rich-text document (ProseMirror/TipTap JSON): nested nodes
with a `type`, optional `content` children and `text` on text leaves.
"""
import math
import re
from typing import Any

WORDS_PER_MINUTE = 200


def count_words(text: str) -> int:
    return len(text.split())


def calculate_read_time(content: str) -> int:
    """Minutes to read an HTML, Markdown or plain-text string, rounded up."""
    if not content:
        return 0
    text = re.sub(r"<[^>]*>", " ", content)
    return math.ceil(count_words(text) / WORDS_PER_MINUTE)


def extract_text(node: Any) -> str:
    if not node:
        return ""
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        return " ".join(extract_text(child) for child in node)
    if not isinstance(node, dict):
        return ""

    if node.get("type") == "text":
        return node.get("text") or ""

    # Space between blocks so adjacent paragraphs don't glue words together
    return " ".join(extract_text(child) for child in node.get("content") or [])


def calculate_read_time_from_document(document: Any) -> int:
    """Minutes to read a rich-text document, rounded up."""
    if not document:
        return 0
    if isinstance(document, str):
        return calculate_read_time(document)
    return math.ceil(count_words(extract_text(document)) / WORDS_PER_MINUTE)


def format_read_time(minutes: int) -> str:
    if minutes < 1:
        return "Less than 1 min read"
    if minutes == 1:
        return "1 min read"
    return f"{minutes} min read"
