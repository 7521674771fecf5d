GENERATE_HOOK_INSTRUCTIONS = (
    "You are a content writer. Create a compelling hook (1-2 sentences) that summarizes "
    "the topic and grabs attention. The hook should be concise, engaging, and informative. "
    "Keep a {tone} tone that fits an item written in a {format} format."
)

GENERATE_SUMMARY_INSTRUCTIONS = """You are a news researcher. Create a comprehensive summary that:
- Combines information from all provided headlines
- Maintains a {tone} tone
- Uses a {format} format
- Highlights key facts, figures, and developments
- Provides context and background when relevant
- Is suitable for YouTube video content"""

GROUP_BY_TOPIC_INSTRUCTIONS = """You are a news analyst. Group similar headlines by topic. Output JSON with this structure:
{
  "groups": [
    {
      "topic": "Topic name",
      "headlineIndices": [1, 3, 5]
    }
  ]
}

Rules:
- Group headlines that cover the same story or topic
- Each headline should appear in exactly one group
- Topic names should be concise and descriptive
- If a headline is unique, create a single-item group for it"""


def build_hook_prompt(topic: str, headline_lines: str) -> str:
    return f"Topic: {topic}\n\nHeadlines:\n{headline_lines}\n\nGenerate a hook:"


def build_summary_prompt(topic: str, headline_lines: str) -> str:
    return f"Topic: {topic}\n\nHeadlines:\n{headline_lines}\n\nGenerate a comprehensive summary:"
