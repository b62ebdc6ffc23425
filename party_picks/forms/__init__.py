from party_picks.errors import ValidationFailed


def validate_or_raise(form):
    """Validate a submitted form, raising ValidationFailed with the first error"""
    if form.validate():
        return form

    messages = [message for errors in form.errors.values() for message in errors]
    raise ValidationFailed(messages[0] if messages else None, fields=form.errors)
