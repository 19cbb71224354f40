from django.db import models
import uuid


class FanUser(models.Model):
    """A fan who can vote on setlists. Credentials are managed by the auth service."""

    user_id = models.UUIDField(default=uuid.uuid4, unique=True, primary_key=True)
    username = models.CharField(max_length=50, unique=True)
    email = models.EmailField(max_length=255, unique=True)
    pfp = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    # Session users behave like authenticated Django users wherever that is checked.
    is_authenticated = True
    is_anonymous = False

    def __str__(self):
        return self.username
