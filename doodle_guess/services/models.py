from pydantic import BaseModel
from typing import Any, Optional

# Field names match the browser client's JSON (camelCase)

class AnalyzeDrawingRequest(BaseModel):
    imageData: Optional[str] = None   # data:image/png;base64,...
    modelName: Optional[Any] = None   # non-string selectors resolve to the default profile

class AnalyzeDrawingResponse(BaseModel):
    guess: str
    success: bool = True
    model: str                        # profile display name

class ErrorResponse(BaseModel):
    error: str

class ComparisonOut(BaseModel):
    speed: int
    accuracy: int
    cost: int
    features: list[str]

class ModelOut(BaseModel):
    name: str
    displayName: str
    description: str
    comparison: Optional[ComparisonOut] = None

class ModelsResponse(BaseModel):
    default: str
    models: list[ModelOut]

class LastGuessOut(BaseModel):
    guess: str
    model: str

class StatusResponse(BaseModel):
    in_flight: int
    last_guess: Optional[LastGuessOut] = None
    last_error: Optional[str] = None
    logs: list[str]
