from ..framework import Controller


class UserController(Controller):
    middleware = ["auth", "verified"]

    def index(self):
        return []

    def create(self):
        return {}

    def store(self, request):
        return request

    def show(self, user_id: int):
        return user_id

    def edit(self, user_id: int):
        return user_id

    def update(self, request, user_id: int):
        return user_id

    def destroy(self, user_id: int):
        return None

    def export(self):
        return ""
