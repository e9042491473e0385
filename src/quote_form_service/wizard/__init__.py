from .session import (  # noqa: F401
    SCREEN_CONTACT,
    SCREEN_POSTCODE,
    SCREEN_QUESTIONS,
    QuoteWizard,
    WizardScreen,
)
from .validation import REQUIRED_MESSAGE, is_answered, validate_required  # noqa: F401
