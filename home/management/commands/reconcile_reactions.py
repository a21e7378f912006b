from django.core.management.base import BaseCommand
from home.reactions import find_drifted_notes, reconcile_note_counters


class Command(BaseCommand):
    help = "Rebuild like/dislike counters from reaction rows where they have drifted."

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true', help="Only report drifted notes.")

    def handle(self, *args, **options):
        drifted = list(find_drifted_notes().values_list('id', 'likes', 'dislikes', 'like_rows', 'dislike_rows'))

        for note_id, likes, dislikes, like_rows, dislike_rows in drifted:
            self.stdout.write(
                f"Note {note_id}: likes {likes} -> {like_rows}, dislikes {dislikes} -> {dislike_rows}"
            )
            if not options['dry_run']:
                reconcile_note_counters(note_id)

        verb = "Found" if options['dry_run'] else "Repaired"
        self.stdout.write(self.style.SUCCESS(f"{verb} {len(drifted)} notes"))
