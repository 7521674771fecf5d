LABEL_TOPIC_INSTRUCTIONS = (
    "Extract a concise topic (2-5 words) from the following headline. "
    "Return only the topic, nothing else."
)
