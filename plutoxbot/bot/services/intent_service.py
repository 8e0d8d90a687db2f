from enum import Enum

IMAGE_KEYWORDS = ("image", "photo", "picture", "show me", "draw", "generate")
CREATOR_KEYWORDS = ("who created you", "creator", "who made you")


class Intent(str, Enum):
    IMAGE_REQUEST = "image_request"
    TEXT_REQUEST = "text_request"


# Keyword routing, no model call involved
def classify_intent(text: str) -> Intent:
    lowered = (text or "").lower()
    if any(word in lowered for word in IMAGE_KEYWORDS):
        return Intent.IMAGE_REQUEST
    return Intent.TEXT_REQUEST


def is_creator_query(text: str) -> bool:
    lowered = (text or "").lower()
    return any(phrase in lowered for phrase in CREATOR_KEYWORDS)
