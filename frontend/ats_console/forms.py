"""
Form state and candidate form helpers

``FormState`` tracks values, per-field errors and touched flags the same way
the web form does. The row helpers manage the education and experience lists
of a candidate form.
"""
import copy
import re
from typing import Any, Callable, Dict, Optional

Values = Dict[str, Any]
Validator = Callable[[Values], Dict[str, str]]

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


class FormState:
    """Values, errors and touched flags of one form"""

    def __init__(
        self,
        initial_values: Values,
        validate: Optional[Validator] = None,
        on_submit: Optional[Callable[[Values], Any]] = None,
    ):
        self.initial_values = copy.deepcopy(initial_values)
        self.validate = validate
        self.on_submit = on_submit
        self.values: Values = copy.deepcopy(initial_values)
        self.errors: Dict[str, str] = {}
        self.touched: Dict[str, bool] = {}
        self.is_submitting = False

    def handle_change(self, name: str, value: Any) -> None:
        self.values[name] = value
        # Editing a field clears its error until the next validation
        self.errors.pop(name, None)
        self.touched[name] = True

    def handle_blur(self, name: str) -> None:
        self.touched[name] = True
        if self.validate:
            message = self.validate(self.values).get(name)
            if message:
                self.errors[name] = message

    def validate_form(self) -> bool:
        if not self.validate:
            return True
        self.errors = dict(self.validate(self.values))
        self.touched = {name: True for name in self.values}
        return not self.errors

    def submit(self) -> bool:
        """
        Validate and hand the values to ``on_submit``.

        Returns False without calling ``on_submit`` when validation fails.
        Exceptions from ``on_submit`` propagate to the caller.
        """
        if not self.validate_form():
            return False
        self.is_submitting = True
        try:
            if self.on_submit:
                self.on_submit(copy.deepcopy(self.values))
        finally:
            self.is_submitting = False
        return True

    def reset(self) -> None:
        self.values = copy.deepcopy(self.initial_values)
        self.errors = {}
        self.touched = {}
        self.is_submitting = False

    def set_values(self, values: Values) -> None:
        self.values.update(values)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def is_dirty(self) -> bool:
        return self.values != self.initial_values


def empty_candidate() -> Values:
    return {
        "firstName": "",
        "lastName": "",
        "email": "",
        "phone": "",
        "address": "",
        "notes": "",
        "education": [],
        "experience": [],
    }


def validate_candidate_form(values: Values) -> Dict[str, str]:
    errors = {}
    if not (values.get("firstName") or "").strip():
        errors["firstName"] = "First name is required"
    if not (values.get("lastName") or "").strip():
        errors["lastName"] = "Last name is required"

    email = (values.get("email") or "").strip()
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.search(email):
        errors["email"] = "Invalid email address"

    if values.get("phone") and len(values["phone"]) > 20:
        errors["phone"] = "Phone number is too long"
    return errors


def candidate_form(on_submit: Optional[Callable[[Values], Any]] = None) -> FormState:
    return FormState(empty_candidate(), validate=validate_candidate_form, on_submit=on_submit)


# Education / experience rows


def empty_education() -> Values:
    return {
        "institution": "",
        "degree": "",
        "fieldOfStudy": "",
        "startDate": "",
        "endDate": "",
        "isCurrent": False,
    }


def empty_experience() -> Values:
    return {
        "company": "",
        "position": "",
        "department": "",
        "location": "",
        "description": "",
        "startDate": "",
        "endDate": "",
        "isCurrent": False,
    }


def _normalize_row(row: Values) -> Values:
    row = dict(row)
    if row.get("isCurrent"):
        row["endDate"] = ""
    return row


def _add_row(form: FormState, field: str, row: Values) -> None:
    form.handle_change(field, list(form.values.get(field) or []) + [_normalize_row(row)])


def _update_row(form: FormState, field: str, index: int, row: Values) -> None:
    rows = list(form.values.get(field) or [])
    rows[index] = _normalize_row(row)
    form.handle_change(field, rows)


def _remove_row(form: FormState, field: str, index: int) -> None:
    rows = [row for i, row in enumerate(form.values.get(field) or []) if i != index]
    form.handle_change(field, rows)


def add_education(form: FormState, row: Optional[Values] = None) -> None:
    _add_row(form, "education", row if row is not None else empty_education())


def update_education(form: FormState, index: int, row: Values) -> None:
    _update_row(form, "education", index, row)


def remove_education(form: FormState, index: int) -> None:
    _remove_row(form, "education", index)


def add_experience(form: FormState, row: Optional[Values] = None) -> None:
    _add_row(form, "experience", row if row is not None else empty_experience())


def update_experience(form: FormState, index: int, row: Values) -> None:
    _update_row(form, "experience", index, row)


def remove_experience(form: FormState, index: int) -> None:
    _remove_row(form, "experience", index)


def to_payload(values: Values) -> Values:
    """Request body for ``POST /candidates``; blank optional values are dropped"""

    def compact(entry: Values) -> Values:
        return {key: value for key, value in entry.items() if value != "" and value is not None}

    payload = compact({k: v for k, v in values.items() if k not in ("education", "experience")})
    payload["education"] = [compact(row) for row in values.get("education") or []]
    payload["experience"] = [compact(row) for row in values.get("experience") or []]
    return payload
