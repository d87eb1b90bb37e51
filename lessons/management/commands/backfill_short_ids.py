"""
Assign short codes to lessons created before short codes existed.

Their old "<slug>-<uuid>" links keep working; after the backfill the
canonical URL switches to "<slug>-<short code>".

Run: python manage.py backfill_short_ids [--dry-run]
"""
from django.core.management.base import BaseCommand

from lessons.models import Lesson, ShortCodeCollisionError


class Command(BaseCommand):
    help = 'Generate short codes for lessons that do not have one'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List affected lessons without changing them',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        lessons = Lesson.objects.filter(short_id__isnull=True)
        total = lessons.count()

        self.stdout.write(f'Found {total} lesson(s) without a short code')
        if dry_run:
            self.stdout.write(self.style.WARNING('DRY RUN MODE - No changes will be saved'))

        updated_count = 0
        error_count = 0
        for idx, lesson in enumerate(lessons.iterator(), 1):
            if dry_run:
                self.stdout.write(f'[{idx}/{total}] Would update: {lesson.title} ({lesson.id})')
                continue
            try:
                short_id = lesson.assign_short_id()
            except ShortCodeCollisionError as e:
                error_count += 1
                self.stdout.write(self.style.ERROR(f'[{idx}/{total}] {lesson.id}: {e}'))
                continue
            updated_count += 1
            self.stdout.write(f'[{idx}/{total}] {lesson.title}: {short_id} -> {lesson.get_absolute_url()}')

        self.stdout.write(self.style.SUCCESS(f'Updated: {updated_count}, errors: {error_count}'))
