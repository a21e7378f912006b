"""
Like/dislike toggling for notes.

A user holds at most one NoteReaction per note, so likedBy and dislikedBy are
disjoint by construction. The likes/dislikes columns on Note are kept equal to
the size of those sets with F() updates made in the same transaction as the
reaction row change.
"""
import logging
from django.db import transaction
from django.db.models import Count, F, Q, Value
from django.db.models.functions import Greatest
from core.exceptions import InvalidRequest, NotFound
from .models import Note, NoteReaction

logger = logging.getLogger(__name__)

COUNTER_FIELD = {
    NoteReaction.LIKE: 'likes',
    NoteReaction.DISLIKE: 'dislikes',
}
OPPOSITE = {
    NoteReaction.LIKE: NoteReaction.DISLIKE,
    NoteReaction.DISLIKE: NoteReaction.LIKE,
}


def _increment(field):
    return F(field) + 1


def _decrement(field):
    return Greatest(F(field) - 1, Value(0))


def react(note_id, user_uid, kind):
    """
    Toggle user_uid's `kind` reaction on a note and return the new counters.

    - reacted the other way: switch to `kind`
    - already reacted with `kind`: remove the reaction
    - no reaction yet: add `kind`
    """
    if not isinstance(user_uid, str) or not user_uid:
        raise InvalidRequest("Invalid user")
    if kind not in COUNTER_FIELD:
        raise InvalidRequest(f"Unknown reaction: {kind}")

    field = COUNTER_FIELD[kind]
    opposite = OPPOSITE[kind]
    opposite_field = COUNTER_FIELD[opposite]

    with transaction.atomic():
        # Row lock serializes toggles on the same note; other notes are unaffected
        note = (
            Note.objects.select_for_update()
            .only('id', 'likes', 'dislikes')
            .filter(pk=note_id)
            .first()
        )
        if note is None:
            raise NotFound("Note not found")

        existing = NoteReaction.objects.filter(note_id=note.pk, user_uid=user_uid).first()
        drifted = False

        if existing is not None and existing.kind == opposite:
            drifted = getattr(note, opposite_field) == 0
            existing.kind = kind
            existing.save(update_fields=['kind'])
            Note.objects.filter(pk=note.pk).update(**{
                opposite_field: _decrement(opposite_field),
                field: _increment(field),
            })
            logger.info(f"User {user_uid} switched note {note.pk} from {opposite} to {kind}")
        elif existing is not None:
            drifted = getattr(note, field) == 0
            existing.delete()
            Note.objects.filter(pk=note.pk).update(**{field: _decrement(field)})
            logger.info(f"User {user_uid} removed {kind} on note {note.pk}")
        else:
            NoteReaction.objects.create(note_id=note.pk, user_uid=user_uid, kind=kind)
            Note.objects.filter(pk=note.pk).update(**{field: _increment(field)})
            logger.info(f"User {user_uid} added {kind} on note {note.pk}")

        if drifted:
            # A reaction row existed while its counter was already 0
            logger.error(
                f"Reaction counters on note {note.pk} do not match reaction rows; rebuilding from rows."
            )
            return reconcile_note_counters(note.pk)

        counts = Note.objects.filter(pk=note.pk).values('likes', 'dislikes').get()

    return {"likes": counts['likes'], "dislikes": counts['dislikes']}


def like(note_id, user_uid):
    return react(note_id, user_uid, NoteReaction.LIKE)


def dislike(note_id, user_uid):
    return react(note_id, user_uid, NoteReaction.DISLIKE)


def _uids_with(note, kind):
    # .all() so a prefetch_related("reactions") on the caller's queryset is reused
    rows = sorted(note.reactions.all(), key=lambda r: r.pk)
    return [r.user_uid for r in rows if r.kind == kind]


def liked_by(note):
    return _uids_with(note, NoteReaction.LIKE)


def disliked_by(note):
    return _uids_with(note, NoteReaction.DISLIKE)


def reconcile_note_counters(note_id):
    """Set likes/dislikes to the cardinality of the reaction sets."""
    with transaction.atomic():
        counts = NoteReaction.objects.filter(note_id=note_id).aggregate(
            likes=Count('id', filter=Q(kind=NoteReaction.LIKE)),
            dislikes=Count('id', filter=Q(kind=NoteReaction.DISLIKE)),
        )
        updated = Note.objects.filter(pk=note_id).update(likes=counts['likes'], dislikes=counts['dislikes'])
        if not updated:
            raise NotFound("Note not found")
    return {"likes": counts['likes'], "dislikes": counts['dislikes']}


def find_drifted_notes():
    """Notes whose stored counters differ from their reaction rows."""
    annotated = Note.objects.annotate(
        like_rows=Count('reactions', filter=Q(reactions__kind=NoteReaction.LIKE)),
        dislike_rows=Count('reactions', filter=Q(reactions__kind=NoteReaction.DISLIKE)),
    )
    return annotated.exclude(likes=F('like_rows'), dislikes=F('dislike_rows'))
