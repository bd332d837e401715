from .bag_club import BagClub
from .course import UserCourse, UserCourseHole
from .home_club import HomeClub, HomeClubHole
from .mental_element import MentalElement
from .public import ContactMessage, InterestSignup
from .round import Round, RoundHole, Stroke
from .stroke_type import StrokeType
from .user import User

__all__ = [
    "User",
    "HomeClub",
    "HomeClubHole",
    "UserCourse",
    "UserCourseHole",
    "BagClub",
    "MentalElement",
    "Round",
    "RoundHole",
    "Stroke",
    "StrokeType",
    "ContactMessage",
    "InterestSignup",
]
