import logging
from django.core.management.base import BaseCommand
from home.models import Note
from Profile.models import UserProfile

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Refresh each note's uploader name from its owner's current username."

    def handle(self, *args, **options):
        names = dict(UserProfile.objects.values_list('firebase_uid', 'username'))
        updated = skipped = 0

        for note in Note.objects.only('id', 'uploader', 'uploader_uid').iterator():
            username = names.get(note.uploader_uid)
            if not username:
                self.stdout.write(f"No user found for UID {note.uploader_uid} in note {note.pk}")
                skipped += 1
                continue
            if note.uploader != username:
                Note.objects.filter(pk=note.pk).update(uploader=username)
                updated += 1

        logger.info(f"sync_uploaders: {updated} updated, {skipped} without owner profile")
        self.stdout.write(self.style.SUCCESS(f"Updated {updated} notes ({skipped} skipped)"))
