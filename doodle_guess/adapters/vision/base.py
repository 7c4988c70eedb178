from doodle_guess.config.models import ModelProfile


class VisionAdapter:
    # set by adapters that call a paid API and must refuse to run without a key
    requires_credential = False

    def guess(self, image_data: str, profile: ModelProfile) -> str | None:
        """Return the model's raw text guess for an encoded image (data URL).

        Returns None when the model answered without any text.
        Raises RelayError subclasses on failure.
        """
        raise NotImplementedError

    def close(self):
        pass
