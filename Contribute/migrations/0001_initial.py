import uuid

import Contribute.models
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Session",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=160)),
                ("algorithm_text", models.TextField(blank=True, null=True)),
                ("collect_algorithm_feedback", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="Contributor",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=120)),
                ("token", models.CharField(default=Contribute.models.generate_token, editable=False, max_length=64, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("algorithm_acknowledged_at", models.DateTimeField(blank=True, null=True)),
                ("algorithm_feedback", models.TextField(blank=True, null=True)),
                ("allocation_prefs_submitted_at", models.DateTimeField(blank=True, null=True)),
                ("interview_completed", models.BooleanField(default=False)),
                ("interview_completed_at", models.DateTimeField(blank=True, null=True)),
                ("evidence_text", models.TextField(blank=True, default="")),
                ("cap_table_expertise", models.CharField(blank=True, choices=[("none", "No experience with token distributions or cap tables"), ("some", "Some familiarity (read about it, minor involvement)"), ("experienced", "Experienced (participated in 1-2 token launches or cap table decisions)"), ("expert", "Expert (led or significantly shaped multiple token/equity distributions)")], default="", max_length=16)),
                ("cap_table_expertise_description", models.TextField(blank=True, default="")),
                ("bucket_deferred", models.BooleanField(default=False)),
                ("bucket_delegated_to", models.CharField(blank=True, max_length=160, null=True)),
                ("bucket_votes", models.JSONField(blank=True, null=True)),
                ("bucket_rationale", models.TextField(blank=True, default="")),
                ("lockup_deferred", models.BooleanField(default=False)),
                ("lockup_delegated_to", models.CharField(blank=True, max_length=160, null=True)),
                ("lockup_cliff_months", models.IntegerField(blank=True, null=True)),
                ("lockup_vesting_months", models.IntegerField(blank=True, null=True)),
                ("lockup_tge_percent", models.IntegerField(blank=True, null=True)),
                ("lockup_rationale", models.TextField(blank=True, default="")),
                ("session", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="contributors", to="Contribute.session")),
            ],
            options={
                "ordering": ("-created_at", "-id"),
            },
        ),
    ]
