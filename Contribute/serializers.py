from rest_framework import serializers

from Contribute.allocation import BUCKET_KEYS, LOCKUP_RANGES, can_submit, bucket_total
from Contribute.models import Contributor, Session
from Contribute.progress import ContributorFlags, derive_state, status_label


class SessionSerializer(serializers.ModelSerializer):
    has_algorithm = serializers.BooleanField(read_only=True)

    class Meta:
        model = Session
        fields = ("id", "name", "algorithm_text", "collect_algorithm_feedback", "has_algorithm", "created_at")
        read_only_fields = ("id", "created_at")

    def validate_name(self, value):
        name = (value or "").strip()
        if not name:
            raise serializers.ValidationError("Please enter a session name")
        return name

    def validate_algorithm_text(self, value):
        text = (value or "").strip()
        return text or None


class ContributorSerializer(serializers.ModelSerializer):
    state = serializers.SerializerMethodField()
    status = serializers.SerializerMethodField()

    class Meta:
        model = Contributor
        fields = "__all__"

    def get_state(self, obj):
        return derive_state(ContributorFlags.from_contributor(obj)).value

    def get_status(self, obj):
        return status_label(ContributorFlags.from_contributor(obj))


class BucketVotesField(serializers.DictField):
    child = serializers.IntegerField(min_value=0, max_value=100)

    def to_internal_value(self, data):
        votes = super().to_internal_value(data)
        unknown = set(votes) - set(BUCKET_KEYS)
        if unknown:
            raise serializers.ValidationError(f"Unknown buckets: {', '.join(sorted(unknown))}")
        return votes


class AllocationDraftSerializer(serializers.Serializer):
    """Any subset of the preferences form, as sent by autosave."""
    cap_table_expertise = serializers.ChoiceField(
        choices=[c[0] for c in Contributor.EXPERTISE], allow_blank=True, required=False
    )
    cap_table_expertise_description = serializers.CharField(allow_blank=True, required=False)
    bucket_deferred = serializers.BooleanField(required=False)
    bucket_delegated_to = serializers.CharField(allow_blank=True, allow_null=True, required=False, max_length=160)
    bucket_votes = BucketVotesField(required=False)
    bucket_rationale = serializers.CharField(allow_blank=True, required=False)
    lockup_deferred = serializers.BooleanField(required=False)
    lockup_delegated_to = serializers.CharField(allow_blank=True, allow_null=True, required=False, max_length=160)
    lockup_cliff_months = serializers.IntegerField(
        min_value=LOCKUP_RANGES["lockup_cliff_months"][0], max_value=LOCKUP_RANGES["lockup_cliff_months"][1],
        required=False,
    )
    lockup_vesting_months = serializers.IntegerField(
        min_value=LOCKUP_RANGES["lockup_vesting_months"][0], max_value=LOCKUP_RANGES["lockup_vesting_months"][1],
        required=False,
    )
    lockup_tge_percent = serializers.IntegerField(
        min_value=LOCKUP_RANGES["lockup_tge_percent"][0], max_value=LOCKUP_RANGES["lockup_tge_percent"][1],
        required=False,
    )
    lockup_rationale = serializers.CharField(allow_blank=True, required=False)

    def validate(self, attrs):
        for key in ("bucket_delegated_to", "lockup_delegated_to"):
            if key in attrs:
                attrs[key] = (attrs[key] or "").strip() or None
        return attrs


class AllocationSubmitSerializer(AllocationDraftSerializer):
    """The full form at submission; buckets must total 100 unless deferred."""

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if not attrs.get("bucket_deferred") and not can_submit(attrs.get("bucket_votes"), False):
            raise serializers.ValidationError(
                {"bucket_votes": f"Bucket allocations must sum to 100% (currently {bucket_total(attrs.get('bucket_votes'))}%)"}
            )
        if not attrs.get("lockup_deferred"):
            missing = [f for f in LOCKUP_RANGES if attrs.get(f) is None]
            if missing:
                raise serializers.ValidationError({f: "This field is required unless deferred." for f in missing})
        return attrs


class AlgorithmAcknowledgeSerializer(serializers.Serializer):
    feedback = serializers.CharField(allow_blank=True, required=False, default="")
