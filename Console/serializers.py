from django.conf import settings
from django.urls import reverse
from rest_framework import serializers

from Contribute.models import Contributor, Session
from Contribute.serializers import ContributorSerializer


class ContributorAdminSerializer(ContributorSerializer):
    access_link = serializers.SerializerMethodField()

    def get_access_link(self, obj):
        path = reverse("character-access", kwargs={"token": obj.token})
        base = getattr(settings, "PUBLIC_BASE_URL", "")
        if base:
            return base.rstrip("/") + path
        request = self.context.get("request")
        return request.build_absolute_uri(path) if request else path


class ContributorCreateSerializer(serializers.ModelSerializer):
    session = serializers.PrimaryKeyRelatedField(
        queryset=Session.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Contributor
        fields = ("name", "session")

    def validate_name(self, value):
        name = (value or "").strip()
        if not name:
            raise serializers.ValidationError("Enter the name of the contributor.")
        return name


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)
