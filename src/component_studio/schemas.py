"""
Request Validation Schemas
==========================

marshmallow schemas for every JSON body the API accepts. Routes call
``load_or_raise`` so validation failures surface as the service-layer
``ValidationError`` (HTTP 400) with a readable first message.
"""

from typing import Any, Dict, Optional

from marshmallow import EXCLUDE, RAISE, Schema, ValidationError as MarshmallowValidationError, fields, validate

from .constants import MIN_NAME_LENGTH, MIN_PASSWORD_LENGTH, Dialect, MessageRole, SessionStatus
from .services.service_base import ValidationError


def _first_error(messages: Any, prefix: str = '') -> str:
    """Flatten marshmallow's nested error dict to its first readable message."""
    if isinstance(messages, dict):
        for key, value in messages.items():
            label = key if key != '_schema' else ''
            path = f"{prefix}.{label}" if prefix and label else (label or prefix)
            return _first_error(value, path)
    if isinstance(messages, list) and messages:
        return _first_error(messages[0], prefix)
    text = str(messages)
    return f"{prefix}: {text}" if prefix else text


def load_or_raise(schema: Schema, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    try:
        return schema.load(data)
    except MarshmallowValidationError as exc:
        raise ValidationError(_first_error(exc.messages), details={'fields': exc.messages}) from exc


class PreferencesSchema(Schema):
    """Strict preferences record; unknown keys are an error."""

    class Meta:
        unknown = RAISE

    theme = fields.Str(validate=validate.OneOf(('light', 'dark')))
    default_model = fields.Str(data_key='defaultModel', validate=validate.Length(min=1, max=200))
    default_language = fields.Str(data_key='defaultLanguage', validate=validate.OneOf(Dialect.values()))
    auto_save = fields.Bool(data_key='autoSave')


class RegisterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(
        required=True,
        validate=validate.Length(min=MIN_PASSWORD_LENGTH,
                                 error=f'Password must be at least {MIN_PASSWORD_LENGTH} characters'),
    )
    name = fields.Str(
        required=True,
        validate=validate.Length(min=MIN_NAME_LENGTH,
                                 error=f'Name must be at least {MIN_NAME_LENGTH} characters'),
    )
    phone = fields.Str(allow_none=True, validate=validate.Length(max=40))
    date_of_birth = fields.Date(data_key='dateOfBirth', allow_none=True)


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=validate.Length(min=1))


class ProfileUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(validate=validate.Length(min=MIN_NAME_LENGTH))
    phone = fields.Str(allow_none=True, validate=validate.Length(max=40))
    date_of_birth = fields.Date(data_key='dateOfBirth', allow_none=True)
    avatar = fields.Str(allow_none=True, validate=validate.Length(max=500))
    bio = fields.Str(allow_none=True, validate=validate.Length(max=500))
    location = fields.Str(allow_none=True, validate=validate.Length(max=120))
    website = fields.Str(allow_none=True, validate=validate.Length(max=300))
    # Validated strictly by Preferences.merged
    preferences = fields.Dict(keys=fields.Str())


class ComponentCodeSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    jsx = fields.Str(load_default='')
    tsx = fields.Str(load_default='')
    css = fields.Str(load_default='')
    preview = fields.Str(load_default='')
    description = fields.Str()
    language = fields.Str(validate=validate.OneOf(Dialect.values()))


class AttachmentSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    filename = fields.Str(load_default='')
    original_name = fields.Str(data_key='originalName', load_default='')
    mimetype = fields.Str(load_default='')
    size = fields.Int(load_default=0)
    url = fields.Str(load_default='')


class MessageSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    role = fields.Str(required=True, validate=validate.OneOf([r.value for r in MessageRole]))
    content = fields.Str(required=True)
    timestamp = fields.Str()
    attachments = fields.List(fields.Dict(), load_default=list)
    component_code = fields.Dict(data_key='componentCode')
    metadata = fields.Dict()


class SessionCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(allow_none=True, validate=validate.Length(max=200))
    description = fields.Str(allow_none=True, validate=validate.Length(max=2000))


class SessionUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(validate=validate.Length(min=1, max=200))
    description = fields.Str(allow_none=True, validate=validate.Length(max=2000))
    messages = fields.List(fields.Nested(MessageSchema))
    current_component = fields.Nested(ComponentCodeSchema, data_key='currentComponent')
    tags = fields.List(fields.Str(validate=validate.Length(max=50)))
    status = fields.Str(validate=validate.OneOf([s.value for s in SessionStatus]))


class SessionListQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    page = fields.Int(load_default=1)
    limit = fields.Int(load_default=None, allow_none=True)
    search = fields.Str(load_default='')
    status = fields.Str(load_default=SessionStatus.ACTIVE.value,
                        validate=validate.OneOf([s.value for s in SessionStatus]))


class GenerateRequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    prompt = fields.Str(load_default='', allow_none=True)
    previous_code = fields.Nested(ComponentCodeSchema, data_key='previousCode', allow_none=True)
    model = fields.Str(allow_none=True, validate=validate.Length(max=200))
    language = fields.Str(allow_none=True, validate=validate.OneOf(Dialect.values()))
    attachments = fields.List(fields.Nested(AttachmentSchema), load_default=list)
    session_id = fields.Int(data_key='sessionId', allow_none=True)


class DownloadRequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    jsx = fields.Str(load_default='', allow_none=True)
    tsx = fields.Str(load_default='', allow_none=True)
    css = fields.Str(load_default='', allow_none=True)
    filename = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=100))
