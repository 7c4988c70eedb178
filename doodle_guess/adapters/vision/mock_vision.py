import random

from doodle_guess.adapters.vision.base import VisionAdapter
from doodle_guess.config.models import ModelProfile

GUESSES = ["猫", "房子", "太阳", "树", "汽车", "小鱼", "花", "苹果"]


class MockVision(VisionAdapter):
    """Offline adapter: ignores the image and returns a random word."""

    def __init__(self, status_store, rng: random.Random | None = None):
        self.status = status_store
        self._rng = rng or random.Random()

    def guess(self, image_data: str, profile: ModelProfile) -> str | None:
        word = self._rng.choice(GUESSES)
        self.status.log(f"mock_vision: {word} (profile={profile.name})")
        return word
