from io import StringIO
import pytest
from django.core.management import call_command
from home.models import Note, NoteReaction
from Profile.models import Follow

pytestmark = pytest.mark.django_db


def _run(*args):
    out = StringIO()
    call_command(*args, stdout=out)
    return out.getvalue()


def test_sync_uploaders(alice, make_profile, make_note):
    make_profile(alice, username="alice_renamed")
    note = make_note(owner_uid=alice.uid, uploader="alice")
    orphan = make_note(owner_uid="uid-ghost", uploader="ghost")

    output = _run("sync_uploaders")

    note.refresh_from_db()
    orphan.refresh_from_db()
    assert note.uploader == "alice_renamed"
    assert orphan.uploader == "ghost"
    assert "No user found for UID uid-ghost" in output
    assert "Updated 1 notes (1 skipped)" in output


def test_reconcile_reactions(make_note):
    note = make_note()
    NoteReaction.objects.create(note=note, user_uid="u1", kind=NoteReaction.LIKE)
    Note.objects.filter(pk=note.pk).update(likes=5, dislikes=2)

    output = _run("reconcile_reactions", "--dry-run")
    note.refresh_from_db()
    assert (note.likes, note.dislikes) == (5, 2)
    assert "Found 1 notes" in output

    output = _run("reconcile_reactions")
    note.refresh_from_db()
    assert (note.likes, note.dislikes) == (1, 0)
    assert "Repaired 1 notes" in output

    assert "Repaired 0 notes" in _run("reconcile_reactions")


def test_check_follow_graph(alice, bob, make_profile):
    a = make_profile(alice)
    b = make_profile(bob)
    Follow.objects.create(follower=a, followee=b)
    Follow.objects.create(follower=a, followee=a)

    output = _run("check_follow_graph")
    assert "uid-alice -> uid-alice" in output
    assert "Found 1 inconsistent edges" in output
    assert Follow.objects.count() == 2

    output = _run("check_follow_graph", "--fix")
    assert "Removed 1 edges" in output
    assert list(Follow.objects.values_list("follower__firebase_uid", "followee__firebase_uid")) == [
        ("uid-alice", "uid-bob"),
    ]
