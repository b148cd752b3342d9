from __future__ import annotations

from typing import Any, Dict

from pydantic import ValidationError

from backend.onboarding.models import OnboardingForm


def validate_form(values: Dict[str, Any], require_consent: bool = False) -> Dict[str, str]:
    """Field -> message for every failing rule; empty when the form can be submitted."""
    errors: Dict[str, str] = {}
    try:
        OnboardingForm.model_validate(values)
    except ValidationError as exc:
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else "form"
            errors.setdefault(field, err["msg"].removeprefix("Value error, "))
    if require_consent and not values.get("gdprConsent"):
        errors.setdefault("gdprConsent", "Please accept the data processing terms")
    return errors
