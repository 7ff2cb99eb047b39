# src/generation/prompts.py - v1
"""Prompt contracts for topic, related-topic and detail generation.

Every prompt names the exact JSON shape and forbids markdown fences; the
generation client still cleans and validates whatever comes back.
"""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You write concise, accurate learning material. "
    "Respond ONLY with valid JSON matching the requested shape. "
    "Do not wrap the JSON in markdown code fences and add no prose."
)

TOPIC_PROMPT = """Generate a learning guide for broad and deep understanding of the various aspects of the topic "{title}".
Respond in this exact JSON format:
{{
  "summary": "Three sentences with the most important things to know about the topic",
  "sections": [
    {{
      "category": "Aspect name",
      "facts": ["Fact 1", "Fact 2", "Fact 3"]
    }}
  ],
  "relatedTopics": ["Related topic 1", "Related topic 2", "Related topic 3"]
}}
Include between 3 and 5 related topics."""

RELATED_TOPICS_PROMPT = """Generate exactly {count} topics closely related to "{title}".
Respond with only a JSON array of {count} strings, for example ["Topic A", "Topic B", "Topic C"]."""

DETAIL_PROMPT = """I am learning about "{title}". In this context tell me more about: {fact}
Respond in this exact JSON format:
{{
  "caption": "Short title",
  "points": ["Knowledge nugget 1", "Knowledge nugget 2", "Knowledge nugget 3"]
}}"""

BOOK_DETAIL_PROMPT = """Tell me more about the book "{title}" by {authors} with description: {description} and url: {url}
Respond in this exact JSON format:
{{
  "caption": "Short title",
  "points": ["Knowledge nugget 1", "Knowledge nugget 2", "Knowledge nugget 3"]
}}"""

VIDEO_DETAIL_PROMPT = """Tell me the key takeaways from the video titled "{title}" with description: {description} and url: {url}
Respond in this exact JSON format:
{{
  "caption": "Short title",
  "points": ["Knowledge nugget 1", "Knowledge nugget 2", "Knowledge nugget 3"]
}}"""

WIKI_DETAIL_PROMPT = """I am reading the Wikipedia page for "{title}". List the things to know from this text: {text}
For longer pages a longer list of things to know is better.
Respond in this exact JSON format:
{{
  "caption": "Short title",
  "points": ["Knowledge nugget 1", "Knowledge nugget 2", "Knowledge nugget 3"]
}}"""

FALLBACK_RELATED_SUFFIXES: tuple[str, ...] = (
    "basics",
    "fundamentals",
    "overview",
    "history",
    "applications",
    "key concepts",
    "examples",
    "open questions",
)


def topic_prompt(title: str) -> str:
    return TOPIC_PROMPT.format(title=title)


def related_topics_prompt(title: str, count: int = 3) -> str:
    return RELATED_TOPICS_PROMPT.format(title=title, count=count)


def detail_prompt(title: str, fact: str) -> str:
    return DETAIL_PROMPT.format(title=title, fact=fact)


def fallback_related_topics(title: str, count: int = 3) -> list[str]:
    """Deterministic, distinct suggestions used when related-topic generation fails."""
    return [f"{title} {suffix}" for suffix in FALLBACK_RELATED_SUFFIXES[:count]]
