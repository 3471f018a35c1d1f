"""
Chased-topic extraction.

The chasing stage runs more than once in a long journey. Topics pulled from
its output are fed back into the next chasing prompt so it looks elsewhere.
"""

import re

HEADER_PATTERN = re.compile(r"(?:^|\n)(?:\*\*)?(?:\d+\.|[-•])\s*\*\*([^*\n]+)\*\*")
TOPIC_PATTERNS = (
    re.compile(r"(?:root cause|problem|issue|challenge|constraint)[:\s]+([^.\n]+)", re.IGNORECASE),
    re.compile(r"(?:symptom|pattern|assumption|leverage point)[:\s]+([^.\n]+)", re.IGNORECASE),
)

MIN_HEADER_LENGTH = 10
MIN_TOPIC_LENGTH = 15
MAX_TOPIC_LENGTH = 200
BOILERPLATE = ("follow", "structured approach")


def extract_chased_topics(content: str) -> list[str]:
    """Headers and problem phrases from chasing output, in order, without repeats."""
    topics: list[str] = []

    for match in HEADER_PATTERN.finditer(content):
        topic = match.group(1).strip()
        if MIN_HEADER_LENGTH < len(topic) < MAX_TOPIC_LENGTH and topic not in topics:
            topics.append(topic)

    for pattern in TOPIC_PATTERNS:
        for match in pattern.finditer(content):
            topic = match.group(1).strip()
            if not MIN_TOPIC_LENGTH < len(topic) < MAX_TOPIC_LENGTH:
                continue
            lower = topic.lower()
            if any(word in lower for word in BOILERPLATE) or topic in topics:
                continue
            topics.append(topic)

    return topics
