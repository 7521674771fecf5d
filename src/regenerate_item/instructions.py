REGENERATE_INSTRUCTIONS = (
    "You are a news researcher. Create content that maintains a {tone} tone "
    "and uses a {format} format."
)

REGENERATE_WITH_CHANGES_INSTRUCTIONS = (
    'You are a news researcher. The user requested changes: "{instructions}". '
    "Apply these changes while creating content that maintains a {tone} tone "
    "and uses a {format} format."
)


def build_regenerate_hook_prompt(topic: str, headline_lines: str) -> str:
    return f"Topic: {topic}\n\nHeadlines:\n{headline_lines}\n\nGenerate a compelling hook (1-2 sentences):"


def build_regenerate_summary_prompt(topic: str, headline_lines: str) -> str:
    return (
        f"Topic: {topic}\n\nHeadlines:\n{headline_lines}\n\n"
        "Generate a comprehensive summary suitable for YouTube content:"
    )
