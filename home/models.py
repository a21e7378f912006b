from django.db import models


class Note(models.Model):
    title = models.CharField(max_length=255)
    filename = models.CharField(max_length=255)
    # Display name at upload time; sync_uploaders refreshes it
    uploader = models.CharField(max_length=150)
    uploader_uid = models.CharField(max_length=128, db_index=True)
    file_url = models.CharField(max_length=500)
    year = models.CharField(max_length=50, db_index=True)
    semester = models.CharField(max_length=50)
    subject = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")

    # Derived from NoteReaction rows; only ever changed through home.reactions
    likes = models.PositiveIntegerField(default=0)
    dislikes = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.title} - {self.subject} - Year {self.year} - Sem {self.semester}"

    class Meta:
        indexes = [
            models.Index(fields=['uploader_uid', 'created_at']),
            models.Index(fields=['year', 'semester', 'subject']),
        ]


class NoteReaction(models.Model):
    LIKE = 'like'
    DISLIKE = 'dislike'
    KIND_CHOICES = [
        (LIKE, 'Like'),
        (DISLIKE, 'Dislike'),
    ]

    note = models.ForeignKey(Note, on_delete=models.CASCADE, related_name='reactions')
    user_uid = models.CharField(max_length=128)
    kind = models.CharField(max_length=10, choices=KIND_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user_uid} {self.kind}s note {self.note_id}"

    class Meta:
        # One row per user per note: likedBy and dislikedBy can never overlap
        constraints = [
            models.UniqueConstraint(fields=['note', 'user_uid'], name='unique_reaction_per_user'),
        ]
        indexes = [
            models.Index(fields=['note', 'kind']),
        ]
