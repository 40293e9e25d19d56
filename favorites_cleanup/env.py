from dotenv import load_dotenv
import os

# Load variables from .env into environment
load_dotenv()

# Collection layout of the app's Firestore database
BOTS_COLLECTION = os.getenv("BOTS_COLLECTION", "aiSettings")
USERS_COLLECTION = os.getenv("USERS_COLLECTION", "users")
FAVORITES_SUBCOLLECTION = os.getenv("FAVORITES_SUBCOLLECTION", "favorites")

# Job tuning
SCAN_CONCURRENCY = int(os.getenv("CLEANUP_SCAN_CONCURRENCY", "1"))
DELETE_CONCURRENCY = int(os.getenv("CLEANUP_DELETE_CONCURRENCY", "1"))
PAGE_SIZE = int(os.getenv("CLEANUP_PAGE_SIZE", "500"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
