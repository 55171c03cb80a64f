from .publish import publish_issue

__all__ = ["publish_issue"]
