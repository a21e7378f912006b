"""
Follow graph between user profiles.

Each follow is a single Follow row (follower -> followee). A user's `following`
and the other user's `followers` are both read from that row, so the two sides
cannot disagree and every follow/unfollow is one write in one transaction.
"""
import logging
from django.db import IntegrityError, transaction
from django.db.models import F
from core.exceptions import Conflict, InvalidRequest, NotFound
from home.models import Note
from .models import Follow, UserProfile

logger = logging.getLogger(__name__)


def get_or_create_profile(identity):
    """Profile of the authenticated caller, created on first use."""
    profile, created = UserProfile.objects.get_or_create(
        firebase_uid=identity.uid,
        defaults={'username': identity.default_username()},
    )
    if created:
        logger.info(f"Created profile for {identity.uid} ({profile.username})")
    return profile


def get_profile(uid):
    profile = UserProfile.objects.filter(firebase_uid=uid).first()
    if profile is None:
        raise NotFound("User not found")
    return profile


def follow(identity, target_uid):
    if not target_uid:
        raise InvalidRequest("Target user is required")
    if target_uid == identity.uid:
        raise InvalidRequest("Cannot follow yourself")

    # Only the caller is created lazily; an unknown target is an error
    target = get_profile(target_uid)
    current = get_or_create_profile(identity)

    try:
        with transaction.atomic():
            _, created = Follow.objects.get_or_create(follower=current, followee=target)
    except IntegrityError:
        # Lost a race with an identical concurrent follow
        created = False

    if not created:
        raise Conflict("Already following this user")

    logger.info(f"{identity.uid} followed {target_uid}")


def unfollow(identity, target_uid):
    """Remove the follow edge if present. Not following is not an error."""
    target = get_profile(target_uid)
    current = get_or_create_profile(identity)

    with transaction.atomic():
        deleted, _ = Follow.objects.filter(follower=current, followee=target).delete()

    if deleted:
        logger.info(f"{identity.uid} unfollowed {target_uid}")
    else:
        logger.debug(f"{identity.uid} was not following {target_uid}; nothing to remove")


def follow_status(current_uid, target_uid):
    return Follow.objects.filter(
        follower__firebase_uid=current_uid,
        followee__firebase_uid=target_uid,
    ).exists()


def follower_uids(profile):
    return list(
        Follow.objects.filter(followee=profile).order_by('id').values_list('follower__firebase_uid', flat=True)
    )


def following_uids(profile):
    return list(
        Follow.objects.filter(follower=profile).order_by('id').values_list('followee__firebase_uid', flat=True)
    )


def profile_counts(profile):
    """Counts shown on a profile, computed on every read."""
    return {
        "sharedNotes": Note.objects.filter(uploader_uid=profile.firebase_uid).count(),
        "followers": Follow.objects.filter(followee=profile).count(),
        "following": Follow.objects.filter(follower=profile).count(),
    }


def list_asymmetric_follow_edges():
    """
    Edges that break the follower/following invariants, as (follower_uid, followee_uid).

    An edge row is visible from both ends, so the only reachable violation is a
    user following themself.
    """
    return list(
        Follow.objects.filter(follower=F('followee'))
        .order_by('id')
        .values_list('follower__firebase_uid', 'followee__firebase_uid')
    )


def remove_follow_edges(edges):
    removed = 0
    for follower_uid, followee_uid in edges:
        deleted, _ = Follow.objects.filter(
            follower__firebase_uid=follower_uid,
            followee__firebase_uid=followee_uid,
        ).delete()
        removed += deleted
    return removed
