import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY")
QUIZ_MODEL = os.environ.get("QUIZ_MODEL", "gpt-4.1-nano")
QUIZ_TEMPERATURE = float(os.environ.get("QUIZ_TEMPERATURE", "0.5"))

# "memory" | "sql"
STORE_BACKEND = os.environ.get("STORE_BACKEND", "memory")
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./studyquiz.db")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
