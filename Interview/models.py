from django.db import models

from Contribute.models import Contributor


class Message(models.Model):
    ROLES = [("user", "user"), ("assistant", "assistant")]

    # PROTECT: messages are removed explicitly before their contributor
    contributor = models.ForeignKey(Contributor, related_name="messages", on_delete=models.PROTECT)
    role = models.CharField(max_length=16, choices=ROLES)
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")

    def __str__(self):
        return f"{self.role}: {self.content[:40]}"
