"""Local entrypoint.

Exposes an `app` object for platforms that look for one in `main.py`, and
runs the development server when executed directly.
"""

import os

from bicho import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=int(os.getenv("PORT", "8000")), debug=False, threaded=True)
