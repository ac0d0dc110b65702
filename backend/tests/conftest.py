import os
import tempfile

# Settings are cached on first import, so point them at throwaway storage first.
_TMP_DIR = tempfile.mkdtemp(prefix="resume-analyzer-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["UPLOADS_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["GEMINI_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
