from enum import Enum


class SkinType(Enum):
    OILY = "oily"
    DRY = "dry"
    COMBINATION = "combination"
    NORMAL = "normal"
    SENSITIVE = "sensitive"


class SkinTone(Enum):
    FAIR = "fair"
    LIGHT = "light"
    MEDIUM = "medium"
    OLIVE = "olive"
    TAN = "tan"
    DARK = "dark"
    DEEP = "deep"


class SkinConcern(Enum):
    ACNE = "acne"
    DARK_SPOTS = "dark-spots"
    FINE_LINES = "fine-lines"
    WRINKLES = "wrinkles"
    LARGE_PORES = "large-pores"
    UNEVEN_TONE = "uneven-tone"
    DULLNESS = "dullness"
    DRYNESS = "dryness"
    OILINESS = "oiliness"
    REDNESS = "redness"
    SENSITIVITY = "sensitivity"
    DARK_CIRCLES = "dark-circles"
    HYPERPIGMENTATION = "hyperpigmentation"
    TEXTURE = "texture"
    BLACKHEADS = "blackheads"
    WHITEHEADS = "whiteheads"
    SUN_DAMAGE = "sun-damage"
    SCARRING = "scarring"
    ECZEMA = "eczema"
    ROSACEA = "rosacea"
    MELASMA = "melasma"

    @property
    def label(self) -> str:
        """Human readable name, e.g. 'dark spots'."""
        return self.value.replace("-", " ")


class Severity(Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    @property
    def rank(self) -> int:
        # severe first when sorting ascending
        return {"severe": 0, "moderate": 1, "mild": 2}[self.value]
