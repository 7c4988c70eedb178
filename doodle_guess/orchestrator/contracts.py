from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class DisplayRect:
    # on-screen box of the displayed canvas, in screen units
    left: float
    top: float
    width: float
    height: float


@dataclass
class AnalyzeRequest:
    image_data: Optional[str]
    model_name: Optional[str] = None


@dataclass
class AnalyzeResult:
    guess: str
    model: str                 # profile display name
    success: bool = True


@dataclass
class GuessResult:
    guess: str
    timestamp: datetime = field(default_factory=datetime.now)
    model: Optional[str] = None
