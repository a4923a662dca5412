from enum import Enum

class QuestionType(str, Enum):
    """Kinds of questions the generator asks the provider for."""
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
