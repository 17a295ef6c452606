from django.core.management.base import BaseCommand
from django.db import transaction

from core.models import VastuRule
from features.vastu.seed_data import DEFAULT_RULES


class Command(BaseCommand):
    help = "Load the default Vastu rule catalog."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete every existing rule before loading.",
        )

    def handle(self, *args, **options):
        created = updated = 0
        with transaction.atomic():
            if options["reset"]:
                deleted, _ = VastuRule.objects.all().delete()
                self.stdout.write(f"Deleted {deleted} existing rules")
            for data in DEFAULT_RULES:
                fields = {k: v for k, v in data.items() if k != "name"}
                rule = VastuRule.objects.filter(name=data["name"]).first()
                if rule is None:
                    VastuRule.objects.create(name=data["name"], **fields)
                    created += 1
                    continue
                for key, value in fields.items():
                    setattr(rule, key, value)
                rule.save()
                updated += 1
        self.stdout.write(
            self.style.SUCCESS(f"Vastu rules seeded: {created} created, {updated} updated")
        )
