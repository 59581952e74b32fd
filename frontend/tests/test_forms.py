import pytest

from ats_console.forms import (
    FormState,
    add_education,
    add_experience,
    candidate_form,
    remove_education,
    to_payload,
    update_education,
    update_experience,
    validate_candidate_form,
)


def filled_form(on_submit=None):
    form = candidate_form(on_submit=on_submit)
    form.set_values({"firstName": "Ana", "lastName": "García", "email": "ana@example.com"})
    return form


class TestValidateCandidateForm:
    def test_required_fields(self):
        errors = validate_candidate_form({"firstName": " ", "lastName": "", "email": ""})

        assert set(errors) == {"firstName", "lastName", "email"}

    def test_invalid_email(self):
        errors = validate_candidate_form({"firstName": "Ana", "lastName": "G", "email": "ana@"})

        assert errors == {"email": "Invalid email address"}

    def test_phone_length(self):
        errors = validate_candidate_form(
            {"firstName": "Ana", "lastName": "G", "email": "a@b.co", "phone": "1" * 21}
        )

        assert set(errors) == {"phone"}


class TestFormState:
    def test_change_clears_field_error_and_marks_touched(self):
        form = candidate_form()
        form.validate_form()
        assert "firstName" in form.errors

        form.handle_change("firstName", "Ana")

        assert "firstName" not in form.errors
        assert form.touched["firstName"] is True
        assert "lastName" in form.errors

    def test_blur_validates_a_single_field(self):
        form = candidate_form()

        form.handle_blur("email")

        assert set(form.errors) == {"email"}
        assert form.touched == {"email": True}

    def test_validate_form_touches_everything(self):
        form = filled_form()

        assert form.validate_form() is True
        assert form.is_valid
        assert all(form.touched[name] for name in form.values)

    def test_submit_skips_callback_when_invalid(self):
        calls = []
        form = candidate_form(on_submit=calls.append)

        assert form.submit() is False
        assert calls == []

    def test_submit_passes_values(self):
        calls = []
        form = filled_form(on_submit=calls.append)

        assert form.submit() is True
        assert calls[0]["email"] == "ana@example.com"
        assert form.is_submitting is False

    def test_submit_resets_flag_when_callback_fails(self):
        def boom(values):
            raise RuntimeError("server down")

        form = filled_form(on_submit=boom)

        with pytest.raises(RuntimeError):
            form.submit()

        assert form.is_submitting is False

    def test_dirty_and_reset(self):
        form = FormState({"name": ""})
        assert form.is_dirty is False

        form.handle_change("name", "x")
        assert form.is_dirty is True

        form.reset()
        assert form.values == {"name": ""}
        assert form.touched == {}
        assert form.is_dirty is False


class TestRows:
    def test_add_update_remove_education(self):
        form = candidate_form()
        add_education(form)
        add_education(form, {"institution": "UPM"})

        update_education(form, 0, {"institution": "UCM", "degree": "BSc"})
        remove_education(form, 1)

        assert form.values["education"] == [{"institution": "UCM", "degree": "BSc"}]
        assert form.touched["education"] is True

    def test_current_entry_clears_end_date(self):
        form = candidate_form()
        add_experience(form)

        update_experience(
            form, 0, {"company": "Acme", "position": "Dev", "endDate": "2020-01-01", "isCurrent": True}
        )

        assert form.values["experience"][0]["endDate"] == ""

    def test_rows_do_not_share_state_with_initial_values(self):
        form = candidate_form()
        add_education(form)

        assert form.initial_values["education"] == []


def test_to_payload_drops_blank_values():
    values = {
        "firstName": "Ana",
        "lastName": "García",
        "email": "ana@example.com",
        "phone": "",
        "education": [{"institution": "UCM", "startDate": "", "isCurrent": False}],
        "experience": [],
    }

    assert to_payload(values) == {
        "firstName": "Ana",
        "lastName": "García",
        "email": "ana@example.com",
        "education": [{"institution": "UCM", "isCurrent": False}],
        "experience": [],
    }
