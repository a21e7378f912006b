from rest_framework import serializers
from .models import UserProfile
from .social import follower_uids, following_uids, profile_counts


# Full profile document, field names as the front end reads them
class UserProfileSerializer(serializers.ModelSerializer):
    firebaseUid = serializers.CharField(source='firebase_uid', read_only=True)
    profilePicUrl = serializers.CharField(source='profile_pic_url', read_only=True)
    followers = serializers.SerializerMethodField()
    following = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = UserProfile
        fields = [
            'firebaseUid', 'username', 'college', 'profession', 'bio', 'profilePicUrl',
            'followers', 'following', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields

    def get_followers(self, obj):
        return follower_uids(obj)

    def get_following(self, obj):
        return following_uids(obj)


class ProfileWithCountsSerializer(UserProfileSerializer):
    counts = serializers.SerializerMethodField()

    class Meta(UserProfileSerializer.Meta):
        fields = UserProfileSerializer.Meta.fields + ['counts']
        read_only_fields = fields

    def get_counts(self, obj):
        return profile_counts(obj)


class ProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserProfile
        fields = ['username', 'college', 'profession', 'bio']
        extra_kwargs = {
            'username': {'allow_blank': False},
            'college': {'allow_blank': True},
            'profession': {'allow_blank': True},
            'bio': {'allow_blank': True},
        }


AVATAR_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.webp')


class AvatarUploadSerializer(serializers.Serializer):
    avatar = serializers.FileField()

    def validate_avatar(self, value):
        if value.size == 0:
            raise serializers.ValidationError("No file provided")
        if not value.name.lower().endswith(AVATAR_EXTENSIONS):
            raise serializers.ValidationError("Avatar must be an image.")
        return value


class UserSearchSerializer(serializers.ModelSerializer):
    firebaseUid = serializers.CharField(source='firebase_uid', read_only=True)
    profilePicUrl = serializers.CharField(source='profile_pic_url', read_only=True)

    class Meta:
        model = UserProfile
        fields = ['firebaseUid', 'username', 'profilePicUrl']

