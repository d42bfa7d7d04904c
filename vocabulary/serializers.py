from rest_framework import serializers


class SectionSerializer(serializers.Serializer):
    id          = serializers.CharField(read_only=True)
    name        = serializers.CharField(read_only=True)
    created_at  = serializers.DateTimeField(read_only=True)
    entry_count = serializers.IntegerField(read_only=True)


class EntrySerializer(serializers.Serializer):
    id         = serializers.CharField(read_only=True)
    term       = serializers.CharField(read_only=True)
    meaning    = serializers.CharField(read_only=True)
    example    = serializers.CharField(read_only=True)
    section_id = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


class EntryDraftSerializer(serializers.Serializer):
    term    = serializers.CharField(read_only=True)
    meaning = serializers.CharField(read_only=True)
    example = serializers.CharField(read_only=True)


class CompletionRecordSerializer(serializers.Serializer):
    id           = serializers.CharField(read_only=True)
    user_id      = serializers.CharField(read_only=True)
    section_id   = serializers.CharField(read_only=True)
    section_name = serializers.CharField(read_only=True)
    cycle_number = serializers.IntegerField(read_only=True)
    completed_at = serializers.DateTimeField(read_only=True)


# ── request bodies ──────────────────────────────────────────────────
class SectionInputSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class EntriesInputSerializer(serializers.Serializer):
    section_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    text       = serializers.CharField(required=False, allow_blank=True, allow_null=True,
                                       trim_whitespace=False)


class PreviewInputSerializer(serializers.Serializer):
    text = serializers.CharField(required=False, allow_blank=True, allow_null=True,
                                 trim_whitespace=False)


class CompleteInputSerializer(serializers.Serializer):
    section_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
