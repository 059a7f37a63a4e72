"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class MessageSchema(Schema):
    """Plain ``{message}`` acknowledgment."""

    message = fields.String(required=True)


class CreatedSchema(MessageSchema):
    """Acknowledgment carrying the id of the created row."""

    id = fields.Integer(required=True)


class CursorQuerySchema(Schema):
    """Keyset cursor: the last id seen on the previous page."""

    cursor = fields.Integer(load_default=None, validate=validate.Range(min=1))
