from .deck_validators import DeckValidators
from .tracking_validators import TrackingValidators

__all__ = ["DeckValidators", "TrackingValidators"]
