"""Quiz-related constants shared across core and server layers."""

DEFAULT_QUESTION_COUNT: int = 100
MIN_QUESTION_COUNT: int = 1
MAX_QUESTION_COUNT: int = 500
USE_ALL_QUESTIONS: str = "all"
TARGET_INCORRECT_ANSWER_COUNT: int = 3
NO_ANSWER_TEXT: str = "No answer"
FLAG_REASON: str = "User flagged for review"

# Document store collections and documents
QUESTIONS_COLLECTION: str = "questions"
CONFIG_COLLECTION: str = "config"
QUIZ_CONFIG_DOCUMENT: str = "quiz"
USERS_COLLECTION: str = "users"
RESPONSES_COLLECTION: str = "quizResponses"
FEEDBACK_COLLECTION: str = "feedback"
FLAGS_COLLECTION: str = "flaggedQuestions"
