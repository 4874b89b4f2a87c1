from enum import Enum


class UserType(str, Enum):
    STUDENT = "student"
    OWNER = "owner"
