# models/enums.py

from enum import Enum


class Theme(Enum):
    DREAMING = "dreaming"
    MOOD_SCORE = "moodScore"
    TRAINING = "training"
    DIET = "diet"
    SOCIAL_RELATIONS = "socialRelations"
    FAMILY_RELATIONS = "familyRelations"
    SELF_EDUCATION = "selfEducation"


# Column and snapshot order
THEME_ORDER = [theme.value for theme in Theme]


class MoodCategory(Enum):
    BAD = "Bad"
    NORMAL = "Normal"
    GOOD = "Good"


class NoteField(Enum):
    POSITIVES = "positives"
    NEGATIVES = "negatives"
