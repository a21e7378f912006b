from django.core.management.base import BaseCommand
from Profile.social import list_asymmetric_follow_edges, remove_follow_edges


class Command(BaseCommand):
    help = "Report follow edges that break the follower/following invariants."

    def add_arguments(self, parser):
        parser.add_argument('--fix', action='store_true', help="Delete the offending edges.")

    def handle(self, *args, **options):
        edges = list_asymmetric_follow_edges()
        for follower, followee in edges:
            self.stdout.write(f"{follower} -> {followee}")

        if options['fix'] and edges:
            removed = remove_follow_edges(edges)
            self.stdout.write(self.style.SUCCESS(f"Removed {removed} edges"))
        else:
            self.stdout.write(self.style.SUCCESS(f"Found {len(edges)} inconsistent edges"))
