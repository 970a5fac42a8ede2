"""Fixed catalogues offered to the client"""
from typing import List

DESIGN_STYLES: List[str] = [
    "Modern",
    "Minimalist",
    "Industrial",
    "Scandinavian",
    "Bohemian",
    "Coastal",
    "Farmhouse",
    "Mid-Century Modern",
    "Art Deco",
    "Shabby Chic",
    "Eclectic",
]

# Compared case-insensitively against the selected room type
EXTERIOR_ROOM_TYPE = "Exterior"

ROOM_TYPES: List[str] = [
    "Living Room",
    "Bedroom",
    "Kitchen",
    "Dining Room",
    "Home Office",
    "Bathroom",
    "Kids Room",
    "Entryway",
    EXTERIOR_ROOM_TYPE,
]
