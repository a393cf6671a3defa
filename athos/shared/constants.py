"""Application-wide constants.

This module centralizes magic numbers and configuration values that are
used across multiple modules. Values that need to be configurable at
runtime should go in config.py instead.
"""

# ===================
# Completion
# ===================

# Section completion is split evenly between content and quiz
CONTENT_COMPLETION_WEIGHT = 50
QUIZ_COMPLETION_WEIGHT = 50

MIN_COMPLETION = 0
MAX_COMPLETION = 100

# Content progress value that marks an item completed
CONTENT_COMPLETE_PROGRESS = 100


# ===================
# Quiz Constants
# ===================

DEFAULT_QUESTION_POINTS = 10
DEFAULT_PASSING_SCORE = 60

# Difficulty recommendation boundary between beginner and intermediate
INTERMEDIATE_SCORE_THRESHOLD = 50


# ===================
# Recommendation Passes
# ===================

# Priorities, highest first
PRIORITY_CURRENT_SECTION = 5
PRIORITY_PENDING_QUIZ = 4
PRIORITY_NEXT_SECTION = 3
PRIORITY_LEARNING_STYLE = 2
PRIORITY_POPULAR = 1

# Items taken from each pass
CURRENT_SECTION_SUGGESTIONS = 2
NEXT_SECTION_LIMIT = 2
LEARNING_STYLE_LIMIT = 3
POPULAR_LIMIT = 2

# Learning progress evaluation
REMEDIAL_CONTENT_LIMIT = 3
ADVANCED_CONTENT_LIMIT = 3

REASON_CURRENT_SECTION = "Continue your current section"
REASON_PENDING_QUIZ = "Take the quiz for this section"
REASON_NEXT_SECTION = "Continue to next section: {section_id}"
REASON_LEARNING_STYLE = "Matches your {learning_style} learning style"
REASON_POPULAR = "Popular among other learners"
REASON_REMEDIAL = "Additional practice to strengthen understanding"
REASON_ADVANCED = "Advanced content to challenge your understanding"


# ===================
# Learning Style Weights
# ===================

STYLE_COMPLETION_SHARE = 0.7
STYLE_TIME_SHARE = 0.3
