from rest_framework import serializers

from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Message
        fields = "__all__"


class TurnSerializer(serializers.ModelSerializer):
    class Meta:
        model = Message
        fields = ("role", "content")


class ChatRequestSerializer(serializers.Serializer):
    contributorId = serializers.UUIDField()
    message = serializers.CharField(trim_whitespace=False)


class SendMessageSerializer(serializers.Serializer):
    message = serializers.CharField(allow_blank=True)


class FinishInterviewSerializer(serializers.Serializer):
    confirm = serializers.BooleanField(default=False)
    evidence_text = serializers.CharField(allow_blank=True, required=False, default="")
