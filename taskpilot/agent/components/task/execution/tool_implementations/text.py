"""Text analysis tool."""

import re
from collections import Counter

from ..decorators import param, tool
from ..models import ToolResult

TOP_WORDS_LIMIT = 20


@tool(
    name="analyze_text",
    description="Analyzes text content and returns word count, character count, and basic statistics",
    parameters=[
        param("text", "string", "The text content to analyze", required=True),
        param("include_word_frequency", "boolean", "Whether to include word frequency analysis", default=False),
    ],
)
async def analyze_text(params: dict) -> ToolResult:
    text = params["text"]
    if not isinstance(text, str):
        return ToolResult.fail("Parameter 'text' must be a string")

    words = text.split()
    sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
    paragraphs = [p for p in re.split(r"\n\n+", text) if p.strip()]

    result = {
        "character_count": len(text),
        "character_count_no_spaces": len(re.sub(r"\s", "", text)),
        "word_count": len(words),
        "sentence_count": len(sentences),
        "paragraph_count": len(paragraphs),
        "average_word_length": sum(len(w) for w in words) / len(words) if words else 0,
        "average_sentence_length": len(words) / len(sentences) if sentences else 0,
    }

    if params.get("include_word_frequency"):
        normalized = (re.sub(r"[^\w]", "", w.lower()) for w in words)
        frequency = Counter(w for w in normalized if w)
        result["top_words"] = dict(frequency.most_common(TOP_WORDS_LIMIT))

    return ToolResult.ok(result)
