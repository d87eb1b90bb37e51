import re

from rest_framework import serializers

from .identifiers import lesson_url
from .models import Tag, Lesson, LessonMaterial, AdditionalActivity, UserLessonMaterial
from .services import create_lesson, update_lesson
from .utils import sanitize_text

VIMEO_URL_RE = re.compile(r'^https?://(www\.)?(vimeo\.com|player\.vimeo\.com)')

SANITIZED_FIELDS = ('title', 'description', 'duration', 'period', 'target_group', 'lesson_type')


class SanitizedFieldsMixin:
    """Strips markup from the plain-text fields listed in ``sanitized_fields``."""
    sanitized_fields = ()

    def validate(self, attrs):
        attrs = super().validate(attrs)
        for name in self.sanitized_fields:
            if isinstance(attrs.get(name), str):
                attrs[name] = sanitize_text(attrs[name])
        return attrs


class TagSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ['id', 'title', 'created_at']
        read_only_fields = ['id', 'created_at']


class LessonMaterialSerializer(SanitizedFieldsMixin, serializers.ModelSerializer):
    sanitized_fields = ('title', 'description')

    class Meta:
        model = LessonMaterial
        fields = [
            'id', 'lesson', 'title', 'description', 'content',
            'specification', 'duration', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'lesson', 'created_at', 'updated_at']


class AdditionalActivitySerializer(SanitizedFieldsMixin, serializers.ModelSerializer):
    sanitized_fields = ('title', 'description')

    class Meta:
        model = AdditionalActivity
        fields = ['id', 'lesson', 'title', 'description', 'image_url', 'created_at', 'updated_at']
        read_only_fields = ['id', 'lesson', 'created_at', 'updated_at']


class LessonListSerializer(serializers.ModelSerializer):
    tags = TagSerializer(many=True, read_only=True)
    slug = serializers.CharField(read_only=True)
    url = serializers.SerializerMethodField()

    class Meta:
        model = Lesson
        fields = [
            'id', 'short_id', 'title', 'slug', 'url', 'description', 'duration',
            'period', 'target_group', 'lesson_type', 'publication_date',
            'published', 'tags',
        ]

    def get_url(self, obj):
        return lesson_url(obj)


class LessonDetailSerializer(LessonListSerializer):
    materials = LessonMaterialSerializer(many=True, read_only=True)
    additional_activities = AdditionalActivitySerializer(many=True, read_only=True)
    canonical_url = serializers.SerializerMethodField()
    is_canonical = serializers.SerializerMethodField()

    class Meta(LessonListSerializer.Meta):
        fields = LessonListSerializer.Meta.fields + [
            'vimeo_video_url', 'rvp_connection', 'materials',
            'additional_activities', 'canonical_url', 'is_canonical',
            'created_at', 'updated_at',
        ]

    def get_canonical_url(self, obj):
        return lesson_url(obj)

    def get_is_canonical(self, obj):
        """True when the lesson was requested through its current URL."""
        requested = self.context.get('slug_param')
        if requested is None:
            return True
        return lesson_url(obj).rsplit('/', 1)[-1] == requested


class LessonWriteSerializer(SanitizedFieldsMixin, serializers.ModelSerializer):
    """Create/update payload for lessons (admin only)."""
    sanitized_fields = SANITIZED_FIELDS

    tag_ids = serializers.PrimaryKeyRelatedField(
        many=True,
        queryset=Tag.objects.all(),
        source='tags',
        required=False,
    )
    rvp_connection = serializers.ListField(
        child=serializers.CharField(max_length=200),
        required=False,
    )

    class Meta:
        model = Lesson
        fields = [
            'title', 'description', 'vimeo_video_url', 'duration', 'period',
            'target_group', 'lesson_type', 'rvp_connection', 'publication_date',
            'published', 'tag_ids',
        ]
        extra_kwargs = {'title': {'required': True}}

    def validate_vimeo_video_url(self, value):
        if value and not VIMEO_URL_RE.match(value):
            raise serializers.ValidationError('Must be a valid Vimeo URL')
        return value

    def validate_rvp_connection(self, value):
        return [sanitize_text(item) for item in value]

    def create(self, validated_data):
        request = self.context.get('request')
        user = request.user if request and request.user.is_authenticated else None
        tags = validated_data.pop('tags', None)
        return create_lesson(created_by=user, tags=tags, **validated_data)

    def update(self, instance, validated_data):
        tags = validated_data.pop('tags', None)
        return update_lesson(instance, tags=tags, **validated_data)


class UserLessonMaterialSerializer(SanitizedFieldsMixin, serializers.ModelSerializer):
    sanitized_fields = ('title',)

    class Meta:
        model = UserLessonMaterial
        fields = [
            'id', 'lesson', 'source_material', 'title', 'content',
            'specification', 'duration', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'lesson', 'created_at', 'updated_at']
        extra_kwargs = {'title': {'required': False}}

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if self.instance is None and not attrs.get('title') and attrs.get('source_material') is None:
            raise serializers.ValidationError({'title': 'Title is required when no source material is given'})
        return attrs

    def validate_source_material(self, value):
        lesson = self.context.get('lesson')
        if value is not None and lesson is not None and value.lesson_id != lesson.pk:
            raise serializers.ValidationError('Material does not belong to this lesson')
        return value
