"""Question categories offered in the topic picker."""

TOPICS = [
    "💑 Relationships",
    "💻 Technology",
    "📚 Education",
    "💼 Business",
    "👨‍👩‍👧‍👦 Family",
    "🎯 Others",
]

# Picking "Others" asks the user to type a topic instead
CUSTOM_TOPIC_INDEX = 5


def topic_by_index(index: int) -> str | None:
    if 0 <= index < len(TOPICS):
        return TOPICS[index]
    return None
