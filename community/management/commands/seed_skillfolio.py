from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from challenges.models import Challenge
from challenges.services import create_challenge
from community.models import Community

SAMPLE_CHALLENGES = [
    {
        'title': "Build a Portfolio Website",
        'description': "Create a responsive portfolio website using React and Tailwind CSS",
        'days': 14,
        'prize_description': "Featured Spotlight",
    },
    {
        'title': "Mobile App UI Challenge",
        'description': "Design a modern mobile app interface using Figma or Adobe XD",
        'days': 21,
        'prize_description': "Community Recognition",
    },
]

SAMPLE_COMMUNITIES = [
    {
        'name': "Web Development",
        'description': "Community for web developers to share knowledge and collaborate",
        'topics': ["React", "JavaScript", "CSS", "Node.js"],
        'icon': "💻",
    },
    {
        'name': "UI/UX Design",
        'description': "Share design tips, get feedback, and discuss latest trends",
        'topics': ["UI Design", "UX Research", "Figma", "Design Systems"],
        'icon': "🎨",
    },
    {
        'name': "Mobile Development",
        'description': "Mobile app developers sharing experiences and best practices",
        'topics': ["React Native", "Flutter", "iOS", "Android"],
        'icon': "📱",
    },
]


class Command(BaseCommand):
    help = "Create sample challenges and communities when none exist."

    def handle(self, *args, **options):
        now = timezone.now()

        if Challenge.objects.exists():
            self.stdout.write("Challenges already present, skipping.")
        else:
            for sample in SAMPLE_CHALLENGES:
                create_challenge(
                    None,
                    sample['title'],
                    sample['description'],
                    now + timedelta(days=sample['days']),
                    prize_description=sample['prize_description'],
                )
            self.stdout.write(self.style.SUCCESS(f"Created {len(SAMPLE_CHALLENGES)} challenges."))

        if Community.objects.exists():
            self.stdout.write("Communities already present, skipping.")
        else:
            # Seeded communities have no creator and start without members.
            Community.objects.bulk_create([Community(**sample) for sample in SAMPLE_COMMUNITIES])
            self.stdout.write(self.style.SUCCESS(f"Created {len(SAMPLE_COMMUNITIES)} communities."))
