# pollbooth/config.py
# Central place for settings and constants
import os
from dotenv import load_dotenv

load_dotenv()

# --- Database Config ---
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "campus_election")

# --- Security & JWT Config ---
# In production, use secure, environment-variable-based secrets
SECRET_KEY = os.getenv("SECRET_KEY", "a_very_secret_key_for_dev_only")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# --- Election Config ---
# Key of the settings row holding the ISO-8601 voting deadline
DEADLINE_SETTING_KEY = "voting_deadline"

# Results view refresh interval (seconds)
RESULTS_REFRESH_SECONDS = 30

# Shown when a candidate has no photo on file
PLACEHOLDER_PHOTO_URL = "https://picsum.photos/100"

# --- CORS ---
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]
