import secrets
import uuid

from django.db import models


def generate_token() -> str:
    return secrets.token_urlsafe(24)


class Session(models.Model):
    name = models.CharField(max_length=160)
    algorithm_text = models.TextField(null=True, blank=True)
    collect_algorithm_feedback = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def has_algorithm(self) -> bool:
        return bool((self.algorithm_text or "").strip())

    def __str__(self):
        return self.name


class Contributor(models.Model):
    EXPERTISE = [
        ("none", "No experience with token distributions or cap tables"),
        ("some", "Some familiarity (read about it, minor involvement)"),
        ("experienced", "Experienced (participated in 1-2 token launches or cap table decisions)"),
        ("expert", "Expert (led or significantly shaped multiple token/equity distributions)"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120)
    token = models.CharField(max_length=64, unique=True, default=generate_token, editable=False)
    session = models.ForeignKey(
        Session, related_name="contributors", on_delete=models.SET_NULL, null=True, blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    # progress markers
    algorithm_acknowledged_at = models.DateTimeField(null=True, blank=True)
    algorithm_feedback = models.TextField(null=True, blank=True)
    allocation_prefs_submitted_at = models.DateTimeField(null=True, blank=True)
    interview_completed = models.BooleanField(default=False)
    interview_completed_at = models.DateTimeField(null=True, blank=True)
    evidence_text = models.TextField(blank=True, default="")

    # allocation draft, overwritten by autosave until submitted
    cap_table_expertise = models.CharField(max_length=16, choices=EXPERTISE, blank=True, default="")
    cap_table_expertise_description = models.TextField(blank=True, default="")
    bucket_deferred = models.BooleanField(default=False)
    bucket_delegated_to = models.CharField(max_length=160, null=True, blank=True)
    bucket_votes = models.JSONField(null=True, blank=True)
    bucket_rationale = models.TextField(blank=True, default="")
    lockup_deferred = models.BooleanField(default=False)
    lockup_delegated_to = models.CharField(max_length=160, null=True, blank=True)
    lockup_cliff_months = models.IntegerField(null=True, blank=True)
    lockup_vesting_months = models.IntegerField(null=True, blank=True)
    lockup_tge_percent = models.IntegerField(null=True, blank=True)
    lockup_rationale = models.TextField(blank=True, default="")

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self):
        return self.name
