from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand  # type: ignore

from apps.rooms.models import RoomType
from apps.rooms.services import create_room_type

DEFAULT_ROOM_TYPES = [
    {
        "name": "Standard Double Room",
        "description": "Comfortable room with queen bed, private bathroom, and garden view",
        "price": Decimal("850.00"),
        "max_guests": 2,
        "amenities": ["Queen Bed", "Private Bath", "Garden View", "Free WiFi"],
        "bed_type": "Queen",
        "view": "Garden",
        "units": 3,
    },
    {
        "name": "Deluxe Suite",
        "description": "Spacious suite with king bed, sitting area, and stunning mountain views",
        "price": Decimal("1250.00"),
        "max_guests": 4,
        "amenities": ["King Bed", "Mountain View", "Sitting Area", "Free WiFi"],
        "bed_type": "King",
        "view": "Mountain",
        "units": 2,
    },
    {
        "name": "Family Room",
        "description": "Perfect for families with double bed and bunk beds, plus kids' play area",
        "price": Decimal("1450.00"),
        "max_guests": 6,
        "amenities": ["Multiple Beds", "Play Area", "Family Friendly", "Free WiFi"],
        "bed_type": "Double + Bunk",
        "view": "Garden",
        "units": 2,
    },
    {
        "name": "Executive Suite",
        "description": "Ultimate luxury with private balcony, jacuzzi, and panoramic views",
        "price": Decimal("2100.00"),
        "max_guests": 2,
        "amenities": ["Jacuzzi", "Balcony", "Luxury Amenities", "Panoramic View"],
        "bed_type": "King",
        "view": "Panoramic",
        "units": 1,
    },
]


class Command(BaseCommand):
    help = "Creates the default room types and their units when the catalog is empty"

    def handle(self, *args, **options):  # type: ignore
        if RoomType.objects.exists():
            self.stdout.write("Room types already exist, nothing to do")
            return

        for entry in DEFAULT_ROOM_TYPES:
            data = dict(entry)
            unit_count = data.pop("units")
            room_type = create_room_type(data, unit_count=unit_count)
            self.stdout.write(f"Created {room_type.name} with {unit_count} units")

        self.stdout.write(self.style.SUCCESS(f"Seeded {len(DEFAULT_ROOM_TYPES)} room types"))
