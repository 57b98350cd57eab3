"""Mixins shared by the sample models."""

from .framework import Model


class Auditable:
    def audit_log(self):
        return []


class HasFactory:
    @classmethod
    def factory(cls, **attributes):
        return cls(**attributes)


class HasUuids:
    def get_uuid_column_name(self):
        return "uuid"


class Notifiable:
    def notify(self, message):
        return message


class AppModel(Auditable, HasFactory, Model):
    """Application base model."""
