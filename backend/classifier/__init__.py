"""AI module for drug schedule classification via Groq's LLM.

The LLM only classifies and formats names. It never decides what enters the
catalog: the inventory service rejects any answer that is not a schedule
between II and V, and a failed call leaves the catalog untouched.
"""

from .classification_schema import ClassificationResponse
from .gateway import ClassificationGateway, GroqClassificationGateway, parse_classification_response

__all__ = [
    "ClassificationResponse",
    "ClassificationGateway",
    "GroqClassificationGateway",
    "parse_classification_response",
]
