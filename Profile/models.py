from django.conf import settings
from django.db import models


def default_profile_pic():
    return settings.DEFAULT_PROFILE_PIC


class UserProfile(models.Model):
    # Firebase uid; the identity provider owns it, we never change it
    firebase_uid = models.CharField(max_length=128, unique=True)
    username = models.CharField(max_length=150, default="New User", db_index=True)
    college = models.CharField(max_length=255, blank=True, default="")
    profession = models.CharField(max_length=255, blank=True, default="")
    bio = models.TextField(blank=True, default="")
    profile_pic_url = models.CharField(max_length=500, default=default_profile_pic)

    # followers is the reverse accessor of the same Follow rows
    following = models.ManyToManyField(
        'self',
        through='Follow',
        through_fields=('follower', 'followee'),
        symmetrical=False,
        related_name='followers',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.username} ({self.firebase_uid})"


class Follow(models.Model):
    follower = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name='following_edges')
    followee = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name='follower_edges')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Follow({self.follower_id} -> {self.followee_id})"

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['follower', 'followee'], name='unique_follow_edge'),
        ]
        indexes = [
            models.Index(fields=['followee']),
        ]
