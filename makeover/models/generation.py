"""Vendor-neutral shapes exchanged with the generative backend.

The gateway builds a ``ModelRequest`` and reads a ``ModelResponse``; only
``services.gemini_backend`` knows how these map onto the google-genai SDK.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ContentPart:
    """A text part or an inline binary (image) part."""
    text: Optional[str] = None
    inline_data: Optional[bytes] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_text(cls, text: str) -> "ContentPart":
        return cls(text=text)

    @classmethod
    def from_image(cls, data: bytes, mime_type: str) -> "ContentPart":
        return cls(inline_data=data, mime_type=mime_type)


@dataclass
class GenerationConfig:
    response_schema: Optional[Dict[str, Any]] = None
    response_modalities: Optional[List[str]] = None
    temperature: Optional[float] = None


@dataclass
class ModelRequest:
    model: str
    parts: List[ContentPart]
    config: GenerationConfig = field(default_factory=GenerationConfig)


@dataclass
class SafetyRating:
    category: str
    blocked: bool = False


@dataclass
class Candidate:
    parts: List[ContentPart] = field(default_factory=list)
    finish_reason: Optional[str] = None
    safety_ratings: List[SafetyRating] = field(default_factory=list)


@dataclass
class ModelResponse:
    candidates: List[Candidate] = field(default_factory=list)

    @property
    def first_candidate(self) -> Optional[Candidate]:
        return self.candidates[0] if self.candidates else None

    @property
    def text(self) -> str:
        """Concatenated text of the first candidate."""
        candidate = self.first_candidate
        if candidate is None:
            return ""
        return "".join(part.text for part in candidate.parts if part.text)
