from .resources import ArchiveResource, PostResource, UserResource

__all__ = ["ArchiveResource", "PostResource", "UserResource"]
