VERSION = "0.3.0"

FLASHCARDS_FILE = "flashcards.json"
