"""Application constants."""

# Field limits
MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255
MAX_CATEGORY_NAME_LENGTH = 100
MAX_REPS_TEXT_LENGTH = 50
MAX_NOTES_LENGTH = 2000

# Largest load a Numeric(8, 2) column holds
MAX_LOAD = 999999.99

# Partition key for records without a (live) category
UNCATEGORIZED = "uncategorized"

# Upper bound on set rows accepted in one replace
MAX_SETS_PER_RECORD = 50
