"""Canned stage output and responses used across explorer tests."""

from llm.src.models import LLMResponse, TokenUsage

QUESTIONING_OUTPUT = """Here are the open questions.

1. ⭐⭐⭐ Why do deploys fail on Fridays?
2. ⭐⭐ How does the cache warm up after a restart?
3. ⚪ What is the current release cadence?
- Should we freeze merges before releases?
"""

SEARCHING_OUTPUT = """Research results follow.

**Q:** Why do deploys fail on Fridays?
**Answer**: The Friday release train bundles three times more changes than other days.
**Evidence**:
- release logs for the last quarter
- incident reports tagged friday
**Confidence Level**: high

**Q:** Which vendor hosts the status page?
**Answer**: Nobody asked this yet.
**Confidence Level**: low
"""

BUILDING_OUTPUT = """Here is the checklist.

```python
def check_release(changes):
    return len(changes) < 50
```
"""


def make_response(content: str, thinking: str = None) -> LLMResponse:
    return LLMResponse(
        content=content,
        thinking=thinking,
        usage=TokenUsage(input_tokens=10, output_tokens=20),
        model="claude-test",
    )
