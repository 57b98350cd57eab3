from __future__ import annotations

from .concerns import AppModel, Auditable, HasUuids, Notifiable
from .framework import BelongsTo, HasMany


class User(HasUuids, Notifiable, AppModel, Auditable):
    fillable = ["name", "email", "password"]
    hidden = ["password"]
    casts = {"email_verified_at": "datetime", "is_admin": "bool"}
    rules = {"name": "required|max:255", "email": ["required", "email"]}

    def posts(self) -> HasMany[Post]:
        return self.has_many(Post)

    def role(self):
        return self.belongs_to(Role)

    def last_login(self):
        raise RuntimeError("no session store configured")

    def display_name(self) -> str:
        return self.attributes.get("name", "")

    def greeting(self, prefix):
        return f"{prefix} {self.display_name()}"

    def scope_active(self, query):
        return query.where(active=True)

    def scope_of_type(self, query, type_name: str):
        return query.where(type=type_name)

    @classmethod
    def scope_recent(cls, query, days: int = 7):
        return query.where(age_days=days)

    @staticmethod
    def scope_named(query, name):
        return query.where(name=name)


class Post(AppModel):
    __tablename__ = "posts"
    fillable = ["title", "body", "user_id"]

    def author(self) -> BelongsTo[User]:
        return self.belongs_to(User)


class Role(AppModel):
    primary_key = "slug"
    incrementing = False
    key_type = "str"
    timestamps = False
    fillable = ["slug", "label"]
