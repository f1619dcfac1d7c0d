"""Local development entry point.

Usage:
    python run.py
    PORT=8000 python run.py
"""

import os

from dotenv import load_dotenv

load_dotenv()  # Load .env before anything else

from clubsphere import create_app  # noqa: E402

app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=int(os.environ.get("PORT", 3000)))
