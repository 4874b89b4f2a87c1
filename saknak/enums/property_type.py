from enum import Enum


class RentalType(str, Enum):
    APARTMENT = "apartment"
    ROOM = "room"
    BED = "bed"


class PropertyStatus(str, Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    UNAVAILABLE = "unavailable"


class GenderPreference(str, Enum):
    ANY = "any"
    MALE = "male"
    FEMALE = "female"
