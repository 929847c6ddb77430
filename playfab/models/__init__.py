from playfab.models.envelope import ErrorEnvelope, SuccessEnvelope

__all__ = ["ErrorEnvelope", "SuccessEnvelope"]
