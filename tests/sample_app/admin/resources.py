from ..framework import Resource, Section, TextColumn, TextInput, Toggle
from .pages import CreateUser, EditUser, ListPosts, ListUsers, PostActivity, ViewUser


class UserResource(Resource):
    navigation_group = "Accounts"

    @classmethod
    def form_schema(cls):
        return [
            Section("Profile", schema=[
                TextInput("name", required=True),
                TextInput("email", label="Email address", required=True),
            ]),
            Toggle("is_admin"),
        ]

    @classmethod
    def table_schema(cls):
        return [
            TextColumn("name", sortable=True, searchable=True),
            TextColumn("email", searchable=True),
        ]

    @classmethod
    def get_pages(cls):
        return {"index": ListUsers, "create": CreateUser, "edit": EditUser, "view": ViewUser}


class PostResource(Resource):
    model = "sample_app.models.Post"

    @classmethod
    def get_pages(cls):
        return {"index": ListPosts, "activity": PostActivity}


class ArchiveResource(Resource):
    """No model can be determined for this one."""
