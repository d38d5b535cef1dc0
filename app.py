# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from ebook_studio.app import create_app
from ebook_studio.config import Settings

settings = Settings()
app = create_app(settings)

if __name__ == "__main__":
    app.run(
        host=settings.FLASK_HOST,
        port=settings.FLASK_PORT,
        debug=settings.FLASK_DEBUG,
    )
