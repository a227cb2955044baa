"""
Demo data: sample photographers with packages.

Every sample account uses an @shutterconnect.com address so the whole set
can be removed again by email domain.
"""
import random
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from shutterconnect.api.middleware.error_handler import BadRequestException
from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.passwords import hash_password
from shutterconnect.models.packages import Package
from shutterconnect.models.photographers import Photographer
from shutterconnect.models.users import User, UserRole

logger = get_logger(__name__)

SAMPLE_EMAIL_DOMAIN = "@shutterconnect.com"
SAMPLE_PASSWORD = "password123"

SAMPLE_PHOTOGRAPHERS = [
    {
        "first_name": "Rajesh",
        "last_name": "Kumar",
        "email": "rajesh.photographer@shutterconnect.com",
        "bio": "Professional wedding photographer with 8+ years of experience. "
               "Specializing in candid moments and traditional ceremonies.",
        "experience": 8,
        "hourly_rate": 150,
        "location": "Delhi, India",
        "specialties": ["WEDDING", "PORTRAIT", "EVENT"],
        "equipment": ["Canon EOS R5", "Sony A7R IV", "Professional Lighting"],
        "portfolio": [
            "https://images.unsplash.com/photo-1606216794074-735e91aa2c92?w=400",
            "https://images.unsplash.com/photo-1519741497674-611481863552?w=400",
        ],
    },
    {
        "first_name": "Priya",
        "last_name": "Sharma",
        "email": "priya.photographer@shutterconnect.com",
        "bio": "Creative portrait and fashion photographer. "
               "Love capturing the essence of personality through my lens.",
        "experience": 5,
        "hourly_rate": 120,
        "location": "Mumbai, India",
        "specialties": ["PORTRAIT", "FASHION", "HEADSHOTS"],
        "equipment": ["Nikon D850", "Studio Lighting", "Prime Lenses"],
        "portfolio": [
            "https://images.unsplash.com/photo-1554151228-14d9def656e4?w=400",
            "https://images.unsplash.com/photo-1506794778202-cad84cf45f1d?w=400",
        ],
    },
    {
        "first_name": "Arjun",
        "last_name": "Patel",
        "email": "arjun.photographer@shutterconnect.com",
        "bio": "Corporate and event photographer specializing in business photography and conferences.",
        "experience": 6,
        "hourly_rate": 100,
        "location": "Bangalore, India",
        "specialties": ["CORPORATE", "EVENT", "PRODUCT"],
        "equipment": ["Canon EOS 5D Mark IV", "Professional Flash", "Telephoto Lenses"],
        "portfolio": [
            "https://images.unsplash.com/photo-1556761175-b413da4baf72?w=400",
            "https://images.unsplash.com/photo-1515187029135-18ee286d815b?w=400",
        ],
    },
    {
        "first_name": "Sneha",
        "last_name": "Reddy",
        "email": "sneha.photographer@shutterconnect.com",
        "bio": "Newborn and family photographer with a gentle approach to capturing precious moments.",
        "experience": 4,
        "hourly_rate": 80,
        "location": "Chennai, India",
        "specialties": ["NEWBORN", "FAMILY", "PORTRAIT"],
        "equipment": ["Canon EOS R6", "Natural Light Setup", "Macro Lenses"],
        "portfolio": [
            "https://images.unsplash.com/photo-1544005313-94ddf0286df2?w=400",
            "https://images.unsplash.com/photo-1511895426328-dc8714191300?w=400",
        ],
    },
    {
        "first_name": "Vikram",
        "last_name": "Singh",
        "email": "vikram.photographer@shutterconnect.com",
        "bio": "Adventure and landscape photographer. Capturing the beauty of nature and outdoor adventures.",
        "experience": 7,
        "hourly_rate": 90,
        "location": "Jaipur, India",
        "specialties": ["LANDSCAPE", "SPORTS", "REAL_ESTATE"],
        "equipment": ["Sony A7R V", "Drone", "Wide Angle Lenses"],
        "portfolio": [
            "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?w=400",
            "https://images.unsplash.com/photo-1464822759844-d150baec0494?w=400",
        ],
    },
]

# (name, description, hourly-rate multiplier, duration minutes, deliverables)
PACKAGE_TEMPLATES = [
    (
        "Basic Package",
        "Perfect for small events and sessions",
        2,
        120,
        ["20 edited photos", "Online gallery", "Basic retouching"],
    ),
    (
        "Premium Package",
        "Comprehensive coverage for important events",
        4,
        240,
        ["50 edited photos", "Online gallery", "Professional retouching", "Print release"],
    ),
    (
        "Deluxe Package",
        "Full-day coverage with all the extras",
        6,
        480,
        [
            "100+ edited photos",
            "Online gallery",
            "Professional retouching",
            "Print release",
            "USB drive",
            "Same-day preview",
        ],
    ),
]


class SeedService:
    """Create and remove the sample photographer set."""

    def __init__(self, session: Session, rng: Optional[random.Random] = None):
        self.session = session
        self.rng = rng or random.Random()

    def seed_photographers(self) -> list[Photographer]:
        """
        Raises:
            BadRequestException: Photographers already exist
        """
        existing = self.session.execute(select(func.count(Photographer.id))).scalar_one()
        if existing:
            raise BadRequestException(
                "Sample photographers already exist. "
                "Use DELETE /photographers/seed to reset first."
            )

        password_hash = hash_password(SAMPLE_PASSWORD)
        created = []
        for sample in SAMPLE_PHOTOGRAPHERS:
            user = User(
                first_name=sample["first_name"],
                last_name=sample["last_name"],
                email=sample["email"],
                password=password_hash,
                role=UserRole.PHOTOGRAPHER,
                is_active=True,
                is_verified=True,
            )
            self.session.add(user)
            self.session.flush()

            hourly_rate = Decimal(sample["hourly_rate"])
            photographer = Photographer(
                user_id=user.id,
                bio=sample["bio"],
                experience=sample["experience"],
                hourly_rate=hourly_rate,
                location=sample["location"],
                specialties=list(sample["specialties"]),
                equipment=list(sample["equipment"]),
                languages=["English", "Hindi"],
                portfolio=list(sample["portfolio"]),
                is_available=True,
                rating=Decimal(str(round(self.rng.uniform(3, 5), 2))),
                total_reviews=self.rng.randint(10, 60),
                total_bookings=self.rng.randint(20, 120),
            )
            self.session.add(photographer)
            self.session.flush()

            for name, description, multiplier, duration, deliverables in PACKAGE_TEMPLATES:
                self.session.add(Package(
                    photographer_id=photographer.id,
                    name=name,
                    description=description,
                    price=hourly_rate * multiplier,
                    duration=duration,
                    deliverables=list(deliverables),
                    is_active=True,
                ))
            created.append(photographer)

        self.session.commit()
        logger.info(f"Seeded {len(created)} sample photographers")
        return created

    def remove_sample_photographers(self) -> int:
        """Delete sample users; their profiles and packages cascade with them."""
        users = self.session.execute(
            select(User).where(User.email.like(f"%{SAMPLE_EMAIL_DOMAIN}"))
        ).scalars().all()
        for user in users:
            self.session.delete(user)
        self.session.commit()
        logger.info(f"Removed {len(users)} sample photographers")
        return len(users)
