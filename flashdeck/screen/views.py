from pydantic import BaseModel, Field

from flashdeck.domain.flip.animation import Face, FlipPhase


class CardView(BaseModel):
    """What a renderer needs to draw one card for one frame."""

    card_id: int
    question: str
    answer: str
    progress: float = Field(..., ge=0.0, le=180.0, description="Rotation around the vertical axis in degrees")
    is_flipped: bool
    phase: FlipPhase
    face: Face
    text: str
